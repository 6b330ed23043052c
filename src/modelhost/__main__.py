"""Entry point for ``python -m modelhost``."""

from modelhost.cli.main import main


if __name__ == "__main__":
    main()
