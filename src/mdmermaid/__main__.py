#!/usr/bin/env python3
#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Entry point for running mdmermaid as a module.

This allows the package to be executed as:
    python -m mdmermaid [arguments]
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
