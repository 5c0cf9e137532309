"""lambda-bridge command line interface."""

from __future__ import annotations

import signal

import typer
from loguru import logger

from lambda_bridge.bootstrap import build_catalog, build_event_loop, build_hooks
from lambda_bridge.config import load_settings
from lambda_bridge.errors import ConfigurationError

JOIN_POLL_SECONDS = 0.5

app = typer.Typer(name="lambda-bridge", help="Serve Python functions through the Lambda runtime API", add_completion=False)


@app.command("run")
def run(
    functions: list[str] | None = typer.Option(  # noqa: B008
        None, "--function", "-f", help="Function spec 'module:attribute[=name]', repeatable"
    ),
    plugins: bool = typer.Option(True, "--plugins/--no-plugins", help="Load entry point plugins"),
) -> None:
    """Start the event loop and block until it stops."""

    settings = load_settings()
    try:
        loop = build_event_loop(functions or [], settings=settings, load_entrypoints=plugins)
        loop.start()
    except ConfigurationError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=2) from exc

    def _shutdown(signum: int, _frame: object) -> None:
        logger.info("runtime.signal signum={}", signum)
        loop.stop()

    signal.signal(signal.SIGTERM, _shutdown)
    signal.signal(signal.SIGINT, _shutdown)

    # The worker may sit in a long poll after stop(); it is a daemon thread.
    while loop.is_running() and not loop.join(timeout=JOIN_POLL_SECONDS):
        continue

    if loop.fatal_outcome is not None:
        typer.echo(f"fatal: {loop.fatal_outcome.kind} {loop.fatal_outcome.error or ''}".rstrip(), err=True)
        raise typer.Exit(code=1)


@app.command("functions")
def list_functions(
    functions: list[str] | None = typer.Option(None, "--function", "-f", help="Function spec, repeatable"),  # noqa: B008
    plugins: bool = typer.Option(True, "--plugins/--no-plugins", help="Load entry point plugins"),
) -> None:
    """Show the functions the event loop can dispatch to."""

    load_settings()
    try:
        catalog = build_catalog(build_hooks(load_entrypoints=plugins), functions or [])
    except ConfigurationError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=2) from exc

    if not len(catalog):
        typer.echo("No functions registered.")
        return
    for name in sorted(catalog.names()):
        registered = catalog.get(name)
        typer.echo(f"{name}: {registered.function_definition if registered else '-'}")


if __name__ == "__main__":
    app()
