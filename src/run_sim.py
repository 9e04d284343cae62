import sys

from cardiac_ap.cli import main


if __name__ == "__main__":
    sys.exit(main())
