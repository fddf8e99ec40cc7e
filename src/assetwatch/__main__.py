"""Entry point for ``python -m assetwatch``."""

from assetwatch.cli import main

if __name__ == "__main__":
    main()
