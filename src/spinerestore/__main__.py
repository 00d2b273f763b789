"""Allow ``python -m spinerestore``."""

from spinerestore.cli.commands import main

if __name__ == "__main__":
    main()
