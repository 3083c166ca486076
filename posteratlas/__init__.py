"""
Poster Atlas - 2x2 poster image atlas builder

This package packs up to four poster images into one fixed-size PNG atlas,
fitting each image without cropping into a centered 9:16 region of its cell.
"""

__version__ = "1.0.0"
__author__ = "Poster Atlas Team"
