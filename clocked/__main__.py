"""Entry point for ``python -m clocked``."""

import sys

from clocked.cli import main

if __name__ == "__main__":
    sys.exit(main())
