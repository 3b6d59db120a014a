"""Allow ``python -m subcall``."""

from __future__ import annotations

import sys
from pathlib import Path

from subcall.cli.main import main

if __name__ == "__main__":
    sys.exit(main(script_path=Path(__file__)))
