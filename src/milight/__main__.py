"""Main entry point for ``python -m milight``."""

from milight.cli.main import cli

if __name__ == "__main__":
    cli()
