"""
Module: exporter.config

Purpose:
    Export options and physical page geometry.
    Immutable configuration with validation on construction, plus
    loading from plain mappings and JSON files.

Key Classes:
    - ExportOptions: Per-call export configuration
    - PageFormat: Supported paper formats
    - Orientation: Portrait or landscape
    - PageFormatSpec: Physical page size in millimetres

Key Functions:
    - page_format_spec(): Resolve page size for a format/orientation
    - load_options(): Read ExportOptions from a JSON file

Dependencies:
    - dataclasses (std)
    - json (std)

Used By:
    - exporter.layout.planner: Page geometry
    - exporter.controller: Export orchestration
    - dashboard_export.__main__: CLI option parsing
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields, replace
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Optional

logger = logging.getLogger(__name__)


DEFAULT_QUALITY = 0.98
DEFAULT_SCALE = 2.0

# Physical dimensions (mm)
A4_WIDTH_MM = 210.0
LETTER_WIDTH_MM = 216.0
LEGAL_WIDTH_MM = 216.0
PORTRAIT_HEIGHT_MM = 297.0
LANDSCAPE_HEIGHT_MM = 210.0


def to_jpeg_quality(quality: float) -> int:
    """Map a (0, 1] quality onto Pillow's 1-100 JPEG scale."""
    return max(1, min(100, round(quality * 100)))


class PageFormat(str, Enum):
    """Paper format of the exported document."""

    A4 = "a4"
    LETTER = "letter"
    LEGAL = "legal"

    @classmethod
    def parse(cls, value: "PageFormat | str") -> "PageFormat":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(f.value for f in cls)
            raise ValueError(f"Unknown page format {value!r} (expected one of: {choices})") from None


class Orientation(str, Enum):
    """Page orientation."""

    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"

    @classmethod
    def parse(cls, value: "Orientation | str") -> "Orientation":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(o.value for o in cls)
            raise ValueError(f"Unknown orientation {value!r} (expected one of: {choices})") from None


@dataclass(frozen=True)
class PageFormatSpec:
    """
    Physical page size (immutable).

    Attributes:
        width_mm: Page width in millimetres
        height_mm: Page height in millimetres
    """

    width_mm: float
    height_mm: float

    @property
    def size_mm(self) -> tuple[float, float]:
        return (self.width_mm, self.height_mm)


_PAGE_WIDTHS_MM = {
    PageFormat.A4: A4_WIDTH_MM,
    PageFormat.LETTER: LETTER_WIDTH_MM,
    PageFormat.LEGAL: LEGAL_WIDTH_MM,
}

_PAGE_HEIGHTS_MM = {
    Orientation.PORTRAIT: PORTRAIT_HEIGHT_MM,
    Orientation.LANDSCAPE: LANDSCAPE_HEIGHT_MM,
}


def page_format_spec(
    page_format: PageFormat | str,
    orientation: Orientation | str,
) -> PageFormatSpec:
    """
    Resolve the physical page size for a format and orientation.

    Width depends only on the format (Letter and Legal share a width);
    height depends only on the orientation.

    Example:
        >>> page_format_spec(PageFormat.A4, Orientation.PORTRAIT)
        PageFormatSpec(width_mm=210.0, height_mm=297.0)
    """
    fmt = PageFormat.parse(page_format)
    orient = Orientation.parse(orientation)
    return PageFormatSpec(width_mm=_PAGE_WIDTHS_MM[fmt], height_mm=_PAGE_HEIGHTS_MM[orient])


@dataclass(frozen=True)
class ExportOptions:
    """
    Configuration for one export call (immutable).

    Attributes:
        filename: Output file name (None = use the export path's default)
        quality: JPEG quality in (0, 1]
        scale: Capture scale factor (> 0)
        page_format: Paper format
        orientation: Page orientation

    Example:
        >>> options = ExportOptions(filename="report.pdf", scale=1.5)
        >>> options.page_spec.width_mm
        210.0
    """

    filename: Optional[str] = None
    quality: float = DEFAULT_QUALITY
    scale: float = DEFAULT_SCALE
    page_format: PageFormat = PageFormat.A4
    orientation: Orientation = Orientation.PORTRAIT

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        # Accept plain strings for the enum fields
        object.__setattr__(self, "page_format", PageFormat.parse(self.page_format))
        object.__setattr__(self, "orientation", Orientation.parse(self.orientation))

        for name in ("quality", "scale"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{name} must be a number: {value!r}")
        if not 0 < self.quality <= 1:
            raise ValueError(f"quality must be in (0, 1]: {self.quality}")
        if self.scale <= 0:
            raise ValueError(f"scale must be positive: {self.scale}")
        if self.filename is not None and not isinstance(self.filename, str):
            raise ValueError(f"filename must be a string: {self.filename!r}")
        if self.filename is not None and not self.filename.strip():
            raise ValueError("filename must not be empty")

    @property
    def page_spec(self) -> PageFormatSpec:
        """Physical page size for this format/orientation."""
        return page_format_spec(self.page_format, self.orientation)

    @property
    def jpeg_quality(self) -> int:
        """Quality on Pillow's 1-100 JPEG scale."""
        return to_jpeg_quality(self.quality)

    def resolve_filename(self, default: str) -> str:
        return self.filename if self.filename is not None else default

    def with_overrides(self, **changes: Any) -> "ExportOptions":
        """Return a copy with the given fields replaced, ignoring None values."""
        changes = {key: value for key, value in changes.items() if value is not None}
        return replace(self, **changes) if changes else self

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ExportOptions":
        """
        Build options from a plain mapping.

        Accepts "format" as an alias of "page_format".

        Raises:
            ValueError: On unknown keys or invalid values
        """
        data = dict(data)
        if "format" in data:
            if "page_format" in data:
                raise ValueError("Specify only one of 'format' and 'page_format'")
            data["page_format"] = data.pop("format")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown export option(s): {', '.join(unknown)}")

        for key in ("quality", "scale"):
            if key in data:
                try:
                    data[key] = float(data[key])
                except (TypeError, ValueError):
                    raise ValueError(f"{key} must be a number: {data[key]!r}") from None
        return cls(**data)

    def to_dict(self) -> dict[str, Any]:
        return {
            "filename": self.filename,
            "quality": self.quality,
            "scale": self.scale,
            "format": self.page_format.value,
            "orientation": self.orientation.value,
        }


def load_options(path: Path) -> ExportOptions:
    """
    Load ExportOptions from a JSON file.

    Args:
        path: JSON file containing an object of option values

    Returns:
        Validated ExportOptions

    Raises:
        ValueError: If the file is unreadable, malformed, or invalid
    """
    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise ValueError(f"Cannot read options file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ValueError(f"Options file {path} is not valid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise ValueError(f"Options file {path} must contain a JSON object")

    logger.debug(f"Loaded export options from {path}: {payload}")
    return ExportOptions.from_dict(payload)
