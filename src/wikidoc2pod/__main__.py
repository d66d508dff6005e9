"""Module entry point for running with python -m wikidoc2pod."""

import sys

from wikidoc2pod.cli import main

if __name__ == "__main__":
    sys.exit(main())
