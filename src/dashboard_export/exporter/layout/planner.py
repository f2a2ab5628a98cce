"""
Module: exporter.layout.planner

Purpose:
    Split a captured image across fixed-size pages.
    Pure functions; nothing here touches the encoder.

Key Functions:
    - plan_slices(): Lazily yield PageSlices for one image
    - image_height_mm(): Physical height of an image scaled to page width
    - count_pages(): Number of pages an image will occupy

Algorithm:
    1. Scale the image so its width fills the page exactly
    2. If it fits in the first page's available height, emit one slice
    3. Otherwise slide the whole image up by one page per slice until
       nothing remains; every slice after the first starts a new page

Dependencies:
    - exporter.config: ExportOptions, PageFormatSpec
    - exporter.layout.models: PageSlice

Used By:
    - exporter.controller: Document assembly
"""

from __future__ import annotations

import logging
from typing import Iterator

from ..config import ExportOptions, PageFormatSpec
from .models import PageSlice

logger = logging.getLogger(__name__)

# Float slack when deciding whether anything is left to place
EPSILON_MM = 1e-6


def image_height_mm(pixel_width: int, pixel_height: int, spec: PageFormatSpec) -> float:
    """
    Convert pixel height to millimetres with width fixed to the page width.

    Example:
        >>> image_height_mm(1600, 4000, PageFormatSpec(210, 297))
        525.0
    """
    if pixel_width <= 0 or pixel_height <= 0:
        raise ValueError(f"Image dimensions must be positive: {pixel_width}x{pixel_height}")
    return pixel_height * spec.width_mm / pixel_width


def plan_slices(
    pixel_width: int,
    pixel_height: int,
    options: ExportOptions,
    start_offset_mm: float = 0.0,
) -> Iterator[PageSlice]:
    """
    Yield page placements for an image of the given pixel size.

    Args:
        pixel_width: Raster width in pixels
        pixel_height: Raster height in pixels
        options: Export options (page format and orientation)
        start_offset_mm: Space reserved above the image on the first page

    Yields:
        PageSlice per page, in order

    Raises:
        ValueError: If dimensions are non-positive or the offset leaves
            no room on the first page

    Example:
        >>> [s.height_mm for s in plan_slices(1600, 4000, ExportOptions())]
        [297.0, 228.0]
    """
    spec = options.page_spec
    total_mm = image_height_mm(pixel_width, pixel_height, spec)
    page_height = spec.height_mm

    if not 0 <= start_offset_mm < page_height:
        raise ValueError(
            f"start_offset_mm must be in [0, {page_height}): {start_offset_mm}"
        )

    first_available = page_height - start_offset_mm
    logger.debug(
        f"Planning {pixel_width}x{pixel_height}px -> {spec.width_mm}x{total_mm:.2f}mm "
        f"on {spec.width_mm}x{page_height}mm pages (offset {start_offset_mm}mm)"
    )

    if total_mm <= first_available + EPSILON_MM:
        yield PageSlice(
            source_offset_mm=0.0,
            dest_offset_mm=start_offset_mm,
            height_mm=total_mm,
            remaining_height_after_mm=0.0,
            is_page_start=True,
        )
        return

    remaining = total_mm
    consumed = 0.0
    available = first_available
    dest = start_offset_mm

    # Checked before each new page so exact multiples end cleanly
    while remaining > EPSILON_MM:
        band = min(available, remaining)
        remaining -= available
        yield PageSlice(
            source_offset_mm=consumed,
            dest_offset_mm=dest,
            height_mm=band,
            remaining_height_after_mm=remaining if remaining > EPSILON_MM else 0.0,
            is_page_start=True,
        )
        consumed += band
        available = page_height
        dest = -consumed


def count_pages(
    pixel_width: int,
    pixel_height: int,
    options: ExportOptions,
    start_offset_mm: float = 0.0,
) -> int:
    """Number of pages plan_slices() would produce."""
    return sum(1 for _ in plan_slices(pixel_width, pixel_height, options, start_offset_mm))
