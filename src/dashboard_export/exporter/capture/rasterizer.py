"""
Module: exporter.capture.rasterizer

Purpose:
    Abstract interface for turning a named screen region into pixels,
    plus image-backed implementations.

Key Classes:
    - Rasterizer: Abstract base class for region capture
    - ImageRasterizer: Rasterizer over pre-rendered Pillow images
    - DirectoryRasterizer: Loads region screenshots from a directory
    - MappingRasterizer: Serves in-memory images
    - CaptureSettings: Parameters passed to capture()
    - CapturedRegion: Capture output
    - RegionNotFoundError: Exception for missing regions

Dependencies:
    - PIL: Image manipulation

Used By:
    - exporter.controller: Document assembly
    - dashboard_export.__main__: CLI
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional, Tuple

from PIL import Image, ImageColor

from ..errors import ExportError

logger = logging.getLogger(__name__)

DEFAULT_BACKGROUND = "#ffffff"


class RegionNotFoundError(ExportError):
    """Capture target does not resolve to a live region."""

    def __init__(self, region_id: str) -> None:
        super().__init__(f'Element with id "{region_id}" not found')
        self.region_id = region_id


@dataclass(frozen=True)
class CaptureSettings:
    """
    Parameters for a single capture (immutable).

    Attributes:
        scale: Output pixels per source pixel
        background_color: Colour painted under transparent content
        cross_origin_allowed: Whether cross-origin content may be captured
        width: Content extent width in source pixels (None = full)
        height: Content extent height in source pixels (None = full)
    """

    scale: float = 2.0
    background_color: str = DEFAULT_BACKGROUND
    cross_origin_allowed: bool = True
    width: Optional[int] = None
    height: Optional[int] = None

    def __post_init__(self) -> None:
        if self.scale <= 0:
            raise ValueError(f"scale must be positive: {self.scale}")
        for name in ("width", "height"):
            value = getattr(self, name)
            if value is not None and value <= 0:
                raise ValueError(f"{name} must be positive: {value}")


@dataclass(frozen=True)
class CapturedRegion:
    """
    Raster produced for one region (immutable).

    Attributes:
        pixel_width: Raster width in pixels
        pixel_height: Raster height in pixels
        image: Pillow image holding the pixels
    """

    pixel_width: int
    pixel_height: int
    image: Image.Image

    @classmethod
    def from_image(cls, image: Image.Image) -> "CapturedRegion":
        return cls(pixel_width=image.width, pixel_height=image.height, image=image)

    @property
    def aspect_ratio(self) -> float:
        """Height over width."""
        return self.pixel_height / self.pixel_width


class Rasterizer(ABC):
    """
    Abstract interface for capturing screen regions.

    Implementations resolve a region id to its rendered content.
    """

    @abstractmethod
    def content_extent(self, region_id: str) -> Tuple[int, int]:
        """
        Get the full content extent of a region.

        Args:
            region_id: Region identifier

        Returns:
            (width, height) in source pixels, including content
            scrolled out of view

        Raises:
            RegionNotFoundError: If region_id does not resolve
        """

    @abstractmethod
    def capture(self, region_id: str, settings: CaptureSettings) -> CapturedRegion:
        """
        Render a region into a raster.

        Args:
            region_id: Region identifier
            settings: Scale, background and extent to capture

        Returns:
            CapturedRegion with the rendered pixels

        Raises:
            RegionNotFoundError: If region_id does not resolve
        """


class ImageRasterizer(Rasterizer):
    """
    Rasterizer whose regions are already-rendered images.

    Subclasses supply _load(); this class handles background
    flattening, extent cropping and scaling.
    """

    @abstractmethod
    def _load(self, region_id: str) -> Image.Image:
        """Return the source image for a region or raise RegionNotFoundError."""

    def content_extent(self, region_id: str) -> Tuple[int, int]:
        return self._load(region_id).size

    def capture(self, region_id: str, settings: CaptureSettings) -> CapturedRegion:
        source = self._load(region_id)
        width = settings.width or source.width
        height = settings.height or source.height

        background = ImageColor.getrgb(settings.background_color)[:3]
        canvas = Image.new("RGB", (width, height), background)
        rgba = source.convert("RGBA")
        # Extent larger than the source is padded with background
        visible = rgba.crop((0, 0, min(width, rgba.width), min(height, rgba.height)))
        canvas.paste(visible, (0, 0), visible)

        if settings.scale != 1:
            target = (
                max(1, round(width * settings.scale)),
                max(1, round(height * settings.scale)),
            )
            canvas = canvas.resize(target, Image.Resampling.LANCZOS)

        logger.debug(
            f"Captured region {region_id!r}: {width}x{height} @ {settings.scale}x "
            f"-> {canvas.width}x{canvas.height}px"
        )
        return CapturedRegion.from_image(canvas)


class DirectoryRasterizer(ImageRasterizer):
    """
    Rasterizer backed by screenshot files in a directory.

    Attributes:
        root: Directory containing region images
        pattern: File name pattern with a {region_id} placeholder

    Example:
        >>> with DirectoryRasterizer(Path("screens")) as rasterizer:
        ...     region = rasterizer.capture("overview", CaptureSettings(scale=1))
    """

    def __init__(self, root: Path, pattern: str = "{region_id}.png") -> None:
        if "{region_id}" not in pattern:
            raise ValueError(f"pattern must contain '{{region_id}}': {pattern!r}")
        self._root = Path(root)
        self._pattern = pattern
        self._cache: Dict[str, Image.Image] = {}

    def path_for(self, region_id: str) -> Path:
        return self._root / self._pattern.format(region_id=region_id)

    def _load(self, region_id: str) -> Image.Image:
        """Lazy load and cache a region image."""
        image = self._cache.get(region_id)
        if image is None:
            path = self.path_for(region_id)
            # Reject ids that escape the root directory
            if not path.resolve().is_relative_to(self._root.resolve()) or not path.is_file():
                raise RegionNotFoundError(region_id)
            image = Image.open(path)
            image.load()
            self._cache[region_id] = image
        return image

    def close(self) -> None:
        """Close cached images and free resources."""
        for image in self._cache.values():
            image.close()
        self._cache.clear()

    def __enter__(self) -> "DirectoryRasterizer":
        return self

    def __exit__(self, *args) -> None:
        self.close()


class MappingRasterizer(ImageRasterizer):
    """Rasterizer over an in-memory mapping of region id to image."""

    def __init__(self, images: Mapping[str, Image.Image]) -> None:
        self._images = dict(images)

    def _load(self, region_id: str) -> Image.Image:
        try:
            return self._images[region_id]
        except KeyError:
            raise RegionNotFoundError(region_id) from None

    @property
    def available_regions(self) -> list[str]:
        return list(self._images)
