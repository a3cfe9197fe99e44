#!/usr/bin/env python3
"""
main.py - Quick-start entry point.

Convert one image:

    python main.py convert photo.png photo.cga

Or a whole folder (``images/`` -> ``output/``):

    python main.py batch --help
"""

from png2cga.cli import app

if __name__ == "__main__":
    app()
