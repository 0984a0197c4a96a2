"""Allow ``python -m codemarks``."""

import sys

from codemarks.interface.cli import main


if __name__ == "__main__":
    sys.exit(main())
