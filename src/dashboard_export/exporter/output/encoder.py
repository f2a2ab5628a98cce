"""
Module: exporter.output.encoder

Purpose:
    Abstract interface for the page-description backend.
    A stateful builder that accepts page-drawing commands in
    millimetres (origin at the page's top-left) and persists the
    finished document once.

Key Classes:
    - DocumentEncoder: Abstract base class for encoders
    - EncodingError: Exception for rejected operations

Used By:
    - exporter.output.renderer: ReportLabEncoder
    - exporter.controller: Document assembly
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Tuple

from PIL import Image

from ..errors import ExportError

RGB = Tuple[int, int, int]

BLACK: RGB = (0, 0, 0)
GREY: RGB = (128, 128, 128)


class EncodingError(ExportError):
    """Encoder rejected an operation or failed to persist."""
    pass


class DocumentEncoder(ABC):
    """
    Abstract page-drawing backend.

    The document starts with one empty page; new_page() appends another
    and makes it current. Drawing outside the page is clipped.
    """

    @property
    @abstractmethod
    def page_count(self) -> int:
        """Number of pages started so far."""

    @abstractmethod
    def new_page(self) -> None:
        """Begin a new page; subsequent drawing lands on it."""

    @abstractmethod
    def draw_image(
        self,
        image: Image.Image,
        x_mm: float,
        y_mm: float,
        width_mm: float,
        height_mm: float,
    ) -> None:
        """
        Draw an image with its top-left corner at (x_mm, y_mm).

        Raises:
            EncodingError: If the image cannot be embedded
        """

    @abstractmethod
    def draw_text(
        self,
        text: str,
        x_mm: float,
        y_mm: float,
        size: float,
        *,
        color: RGB = BLACK,
    ) -> None:
        """
        Draw a single line of text with its baseline at y_mm.

        Args:
            text: Text to draw
            x_mm: Left edge
            y_mm: Baseline, measured from the page top
            size: Font size in points
            color: RGB colour, 0-255 per channel
        """

    @abstractmethod
    def save(self, filename: str) -> Path:
        """
        Finalize and persist the document.

        Returns:
            Path the document was written to

        Raises:
            EncodingError: If the document cannot be written or was
                already saved
        """
