"""
Main entry point for running the package as a module.

Usage:
    python -m thumbgen classify photos/cat.jpg
    python -m thumbgen process --bucket my-bucket photos/cat.jpg
    python -m thumbgen event event.json
"""

import sys
from .cli import main

if __name__ == '__main__':
    sys.exit(main())
