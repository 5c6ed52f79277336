"""Allow running pywise as a module: python -m pywise."""

from pywise.cli import main

if __name__ == "__main__":
    main()
