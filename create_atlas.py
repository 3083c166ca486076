#!/usr/bin/env python3
"""
Poster Atlas - build dist/packed-images.png from the images/ directory.

Any arguments are passed to the posteratlas CLI (see --help).
"""

from posteratlas.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
