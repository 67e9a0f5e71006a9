"""
imgmark - Main Entry Point
==========================
Runs the console program from a source checkout.

Usage:
    python main.py [-v]
"""

import sys

from imgmark.cli import main

if __name__ == "__main__":
    sys.exit(main())
