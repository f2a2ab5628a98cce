"""
Module: exporter.capture

Purpose:
    Region capture for export.
    Abstracts "produce pixels for a named region" so the assembler can
    run against screenshots, in-memory images, or test fakes.

Key Classes:
    - Rasterizer: Abstract capture interface
    - DirectoryRasterizer: Screenshots on disk
    - MappingRasterizer: In-memory images
    - CaptureSettings, CapturedRegion: Capture input/output
    - RegionNotFoundError: Missing capture target

Dependencies:
    - PIL: Image manipulation
"""

from .rasterizer import (
    Rasterizer,
    ImageRasterizer,
    DirectoryRasterizer,
    MappingRasterizer,
    CaptureSettings,
    CapturedRegion,
    RegionNotFoundError,
)

__all__ = [
    "Rasterizer",
    "ImageRasterizer",
    "DirectoryRasterizer",
    "MappingRasterizer",
    "CaptureSettings",
    "CapturedRegion",
    "RegionNotFoundError",
]
