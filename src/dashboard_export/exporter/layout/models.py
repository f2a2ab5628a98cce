"""
Module: exporter.layout.models

Purpose:
    Data models for page layout.
    Immutable dataclasses describing where a captured image lands on
    each physical page.

Key Classes:
    - PageSlice: One placement of an image onto one page

Dependencies:
    - dataclasses (std)

Used By:
    - exporter.layout.planner: Creates PageSlices
    - exporter.controller: Draws PageSlices
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PageSlice:
    """
    Placement of a (vertically offset) image on a single page.

    The full image is always drawn; the page clips it so that only the
    band starting at source_offset_mm is visible.

    Attributes:
        source_offset_mm: Top of the visible band, measured in the image
        dest_offset_mm: Y position of the image's top edge on the page
        height_mm: Height of the visible band on this page
        remaining_height_after_mm: Image height still to place after this slice
        is_page_start: True if this slice begins on a fresh page

    Example:
        >>> s = PageSlice(297.0, -297.0, 228.0, 0.0, True)
        >>> s.source_bottom_mm
        525.0
    """

    source_offset_mm: float
    dest_offset_mm: float
    height_mm: float
    remaining_height_after_mm: float
    is_page_start: bool

    @property
    def source_bottom_mm(self) -> float:
        """Bottom of the visible band, measured in the image."""
        return self.source_offset_mm + self.height_mm

    @property
    def is_last(self) -> bool:
        return self.remaining_height_after_mm <= 0
