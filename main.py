#!/usr/bin/env python3
"""ConfTimer — entry point.

Run with:
    python main.py
    python -m conftimer
"""

from conftimer.__main__ import main


if __name__ == "__main__":
    main()
