"""Entry point for ``python -m cortex``."""

from cortex.cli.main import main


if __name__ == "__main__":
    main()
