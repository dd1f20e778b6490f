import sys

from .cli import main

if __name__ == "__main__":
    # .env loaded in main() via Config.load() (single config entry)
    sys.exit(main())
