"""Thread-safe running flag shared by the loop worker and its controller."""

from __future__ import annotations

import threading


class LoopState:
    """Single running flag guarded by a lock."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._running = False

    def start(self) -> bool:
        """Set running; return False when it was already set."""
        with self._lock:
            if self._running:
                return False
            self._running = True
            return True

    def stop(self) -> bool:
        """Clear running; return False when it was already clear."""
        with self._lock:
            if not self._running:
                return False
            self._running = False
            return True

    def is_running(self) -> bool:
        with self._lock:
            return self._running
