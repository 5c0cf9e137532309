"""lambda-bridge command line entry point."""

from lambda_bridge.cli import app

if __name__ == "__main__":
    app()
