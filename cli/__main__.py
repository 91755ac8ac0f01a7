"""Allow the CLI to be run as a module with `python -m cli`."""

from .app import main

if __name__ == "__main__":
    main()
