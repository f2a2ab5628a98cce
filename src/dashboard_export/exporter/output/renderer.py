"""
Module: exporter.output.renderer

Purpose:
    DocumentEncoder implementation using ReportLab.
    Pages are sized from PageFormatSpec; images are embedded as JPEG
    once and referenced from every page they appear on. Rasters too
    large for JPEG are cropped to the band visible on each page.

Key Classes:
    - ReportLabEncoder: PDF encoder

Key Functions:
    - create_encoder(): Build an encoder from ExportOptions

Dependencies:
    - reportlab: PDF generation
    - PIL: Image handling

Used By:
    - exporter.controller: Default encoder
"""

from __future__ import annotations

import io
import logging
import math
from pathlib import Path
from typing import Dict, Optional, Tuple

from PIL import Image
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from ..config import DEFAULT_QUALITY, ExportOptions, PageFormatSpec, to_jpeg_quality
from .encoder import BLACK, RGB, DocumentEncoder, EncodingError

logger = logging.getLogger(__name__)

FONT_NAME = "Helvetica"

# Largest side libjpeg can encode
JPEG_MAX_DIMENSION = 65500


def _get_creator() -> str:
    from dashboard_export import __version__
    return f"dashboard-export v{__version__}"


class ReportLabEncoder(DocumentEncoder):
    """
    PDF encoder backed by a ReportLab canvas.

    The canvas writes into memory; save() flushes it to
    output_dir / filename. jpeg_quality is on the 1-100 scale.

    Example:
        >>> encoder = ReportLabEncoder(PageFormatSpec(210, 297))
        >>> encoder.draw_text("Hello", 10, 20, 16)
        >>> encoder.save("hello.pdf")
    """

    def __init__(
        self,
        page_spec: PageFormatSpec,
        *,
        jpeg_quality: int = to_jpeg_quality(DEFAULT_QUALITY),
        output_dir: Optional[Path] = None,
    ) -> None:
        if not 1 <= jpeg_quality <= 100:
            raise ValueError(f"jpeg_quality must be in [1, 100]: {jpeg_quality}")
        self._page_spec = page_spec
        self._jpeg_quality = jpeg_quality
        self._output_dir = Path(output_dir) if output_dir is not None else Path.cwd()
        self._page_width_pt = page_spec.width_mm * mm
        self._page_height_pt = page_spec.height_mm * mm

        self._buffer = io.BytesIO()
        self._canvas = canvas.Canvas(
            self._buffer,
            pagesize=(self._page_width_pt, self._page_height_pt),
        )
        self._canvas.setCreator(_get_creator())

        self._readers: Dict[int, Tuple[Image.Image, ImageReader]] = {}
        self._page_count = 1
        self._saved = False

    @property
    def page_spec(self) -> PageFormatSpec:
        return self._page_spec

    @property
    def page_count(self) -> int:
        return self._page_count

    def new_page(self) -> None:
        self._check_open()
        self._canvas.showPage()
        self._page_count += 1

    def draw_image(
        self,
        image: Image.Image,
        x_mm: float,
        y_mm: float,
        width_mm: float,
        height_mm: float,
    ) -> None:
        self._check_open()
        if max(image.size) > JPEG_MAX_DIMENSION:
            band = _visible_band(image, y_mm, height_mm, self._page_spec.height_mm)
            if band is None:
                return
            image, y_mm, height_mm = band
            reader = self._encode(image)
        else:
            reader = self._reader_for(image)
        try:
            self._canvas.drawImage(
                reader,
                x_mm * mm,
                _transform_y(self._page_height_pt, y_mm, height_mm),
                width=width_mm * mm,
                height=height_mm * mm,
            )
        except Exception as e:
            raise EncodingError(f"Failed to draw image on page {self._page_count}: {e}") from e

    def draw_text(
        self,
        text: str,
        x_mm: float,
        y_mm: float,
        size: float,
        *,
        color: RGB = BLACK,
    ) -> None:
        self._check_open()
        c = self._canvas
        c.saveState()
        c.setFont(FONT_NAME, size)
        c.setFillColorRGB(*(channel / 255.0 for channel in color))
        c.drawString(x_mm * mm, self._page_height_pt - y_mm * mm, text)
        c.restoreState()

    def save(self, filename: str) -> Path:
        self._check_open()
        output_path = self._output_dir / filename
        try:
            # Close the current page even if nothing was drawn on it
            self._canvas.showPage()
            self._canvas.save()
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_bytes(self._buffer.getvalue())
        except OSError as e:
            raise EncodingError(f"Failed to write {output_path}: {e}") from e
        finally:
            self._saved = True
            self._readers.clear()

        logger.info(f"Rendered {self._page_count} pages to {output_path}")
        return output_path

    def _check_open(self) -> None:
        if self._saved:
            raise EncodingError("Document has already been saved")

    def _reader_for(self, image: Image.Image) -> ImageReader:
        """Encode an image once per document."""
        cached = self._readers.get(id(image))
        if cached is not None and cached[0] is image:
            return cached[1]
        reader = self._encode(image)
        self._readers[id(image)] = (image, reader)
        return reader

    def _encode(self, image: Image.Image) -> ImageReader:
        try:
            return _pil_to_reader(image, self._jpeg_quality)
        except OSError as e:
            raise EncodingError(f"Failed to encode image: {e}") from e


def create_encoder(
    options: ExportOptions,
    *,
    output_dir: Optional[Path] = None,
) -> ReportLabEncoder:
    """Build a ReportLabEncoder for the page geometry and quality in options."""
    return ReportLabEncoder(
        options.page_spec,
        jpeg_quality=options.jpeg_quality,
        output_dir=output_dir,
    )


def _pil_to_reader(img: Image.Image, quality: int) -> ImageReader:
    """
    Convert PIL image to a JPEG-backed ReportLab ImageReader.

    Args:
        img: PIL Image object
        quality: JPEG quality (1-100)

    Returns:
        ImageReader for use with ReportLab
    """
    if img.mode != "RGB":
        img = img.convert("RGB")
    buf = io.BytesIO()
    img.save(buf, format="JPEG", quality=quality)
    buf.seek(0)
    return ImageReader(buf)


def _transform_y(page_height_pt: float, y_mm_top: float, height_mm: float) -> float:
    """
    Convert a top-down millimetre Y coordinate to bottom-up PDF points.

    Args:
        page_height_pt: Page height in points
        y_mm_top: Top edge, measured from the page top
        height_mm: Height of element

    Returns:
        Bottom edge, measured from the page bottom, in points
    """
    return page_height_pt - (y_mm_top + height_mm) * mm


def _visible_band(
    image: Image.Image,
    y_mm: float,
    height_mm: float,
    page_height_mm: float,
) -> Optional[Tuple[Image.Image, float, float]]:
    """
    Crop an image placed at y_mm down to the rows visible on the page.

    Used for rasters too large to embed whole. Returns the cropped
    image with its adjusted top and height, or None if nothing shows.
    """
    px_per_mm = image.height / height_mm
    top_mm = max(0.0, -y_mm)
    bottom_mm = min(height_mm, page_height_mm - y_mm)
    if bottom_mm <= top_mm:
        return None

    top_px = max(0, math.floor(top_mm * px_per_mm))
    bottom_px = min(image.height, math.ceil(bottom_mm * px_per_mm))
    band = image.crop((0, top_px, image.width, bottom_px))
    if band.width > JPEG_MAX_DIMENSION:
        band = band.resize(
            (JPEG_MAX_DIMENSION, max(1, round(band.height * JPEG_MAX_DIMENSION / band.width))),
            Image.Resampling.LANCZOS,
        )
    logger.debug(f"Cropped rows {top_px}-{bottom_px} of {image.width}x{image.height}px raster")
    return band, y_mm + top_px / px_per_mm, (bottom_px - top_px) / px_per_mm
