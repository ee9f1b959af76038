import sys

from rec_browser.cli import main


if __name__ == "__main__":
    sys.exit(main())
