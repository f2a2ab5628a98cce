"""
Module: exporter.layout

Purpose:
    Page planning for captured regions.
    Converts raster dimensions into per-page image placements.

Key Functions:
    - plan_slices(): Split an image across pages
    - image_height_mm(): Pixel to millimetre conversion
    - count_pages(): Page count for an image

Key Classes:
    - PageSlice: One image placement on one page

Used By:
    - exporter.controller: Document assembly
"""

from .models import PageSlice
from .planner import plan_slices, image_height_mm, count_pages

__all__ = [
    # Models
    "PageSlice",
    # Functions
    "plan_slices",
    "image_height_mm",
    "count_pages",
]
