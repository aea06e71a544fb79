"""Allow ``python -m notes_cli``."""

from notes_cli.cli.app import run

if __name__ == "__main__":
    run()
