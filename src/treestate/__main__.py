"""Allow running treestate as a module: python -m treestate."""

import sys

from treestate.cli import main

if __name__ == "__main__":
    sys.exit(main())
