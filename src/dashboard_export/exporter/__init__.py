"""
Module: exporter

Purpose:
    Export rendered dashboard regions as paginated PDF documents.
    Captures each region as an image, splits oversized images across
    fixed-size pages and assembles titled sections into one document.

Key Functions:
    - export_region(): Single-region export (fail-fast)
    - export_sections(): Multi-section export (skips missing regions)
    - plan_slices(): Page planning for one image

Key Classes:
    - DocumentAssembler: Export orchestration
    - ExportOptions: Per-call configuration
    - Rasterizer / DocumentEncoder: Collaborator interfaces

Dependencies:
    - PIL: Image manipulation
    - reportlab: PDF generation
"""

from .config import ExportOptions, PageFormat, Orientation, PageFormatSpec, page_format_spec, load_options
from .errors import ExportError
from .layout import PageSlice, plan_slices
from .capture import (
    Rasterizer,
    DirectoryRasterizer,
    MappingRasterizer,
    CaptureSettings,
    CapturedRegion,
    RegionNotFoundError,
)
from .output import DocumentEncoder, ReportLabEncoder, EncodingError
from .controller import (
    DocumentAssembler,
    RegionSection,
    ExportResult,
    ExportFailedError,
    export_region,
    export_sections,
)

__all__ = [
    # Config
    "ExportOptions",
    "PageFormat",
    "Orientation",
    "PageFormatSpec",
    "page_format_spec",
    "load_options",
    # Layout
    "PageSlice",
    "plan_slices",
    # Capture
    "Rasterizer",
    "DirectoryRasterizer",
    "MappingRasterizer",
    "CaptureSettings",
    "CapturedRegion",
    # Output
    "DocumentEncoder",
    "ReportLabEncoder",
    # Controller
    "DocumentAssembler",
    "RegionSection",
    "ExportResult",
    "export_region",
    "export_sections",
    # Errors
    "ExportError",
    "RegionNotFoundError",
    "EncodingError",
    "ExportFailedError",
]
