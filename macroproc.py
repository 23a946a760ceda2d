#!/usr/bin/env python3
"""
Macro processor entry point.

Usage: python macroproc.py input.asm [-o expanded.txt] [-d TABLE_DIR]
"""

from macroproc.processor import main

if __name__ == '__main__':
    main()
