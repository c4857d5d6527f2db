#!/usr/bin/env python3
"""
Shim entrypoint so CI can keep invoking `python scripts/print_docs.py`.
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from docprint.cli import main  # noqa: E402


if __name__ == "__main__":
    main()
