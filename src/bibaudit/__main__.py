"""Allow ``python -m bibaudit``."""

from bibaudit.cli.main import cli

if __name__ == "__main__":
    cli()
