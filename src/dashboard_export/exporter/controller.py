"""
Module: exporter.controller

Purpose:
    Orchestrate region export.
    Capture → Plan → Encode → Save

Key Functions:
    - export_region(): Export one region to a document
    - export_sections(): Export several titled regions to one document

Key Classes:
    - DocumentAssembler: Drives rasterizer, planner and encoder
    - RegionSection: Region id plus display title
    - ExportResult: Outcome of an export
    - ExportFailedError: Exception for export failures

Dependencies:
    - exporter.capture: Region capture
    - exporter.layout: Page planning
    - exporter.output: PDF encoding

Used By:
    - dashboard_export.__main__: CLI
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from functools import partial
from pathlib import Path
from typing import Callable, Iterable, Optional

from .capture import CaptureSettings, CapturedRegion, Rasterizer, RegionNotFoundError
from .config import ExportOptions
from .errors import ExportError
from .layout import image_height_mm, plan_slices
from .output import GREY, BLACK, DocumentEncoder, create_encoder

logger = logging.getLogger(__name__)

DEFAULT_REGION_FILENAME = "dashboard-report.pdf"
DEFAULT_SECTIONS_FILENAME = "complete-dashboard-report.pdf"

REGION_FAILED_MESSAGE = "Failed to generate PDF report"
SECTIONS_FAILED_MESSAGE = "Failed to generate complete dashboard PDF report"

# Header text placement (mm from page top-left, baseline)
TIMESTAMP_X_MM = 10.0
TIMESTAMP_Y_MM = 10.0
TIMESTAMP_FONT_SIZE = 8
TITLE_X_MM = 10.0
TITLE_Y_MM = 20.0
TITLE_FONT_SIZE = 16
# Vertical space reserved above a section's image for its title
TITLE_BLOCK_MM = 30.0

EncoderFactory = Callable[[ExportOptions], DocumentEncoder]


class ExportFailedError(ExportError):
    """Export aborted; the original error is chained as __cause__."""

    def __init__(self, message: str, region_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.region_id = region_id


@dataclass(frozen=True)
class RegionSection:
    """
    A capturable region and the title it gets in the document.

    Attributes:
        id: Region identifier passed to the rasterizer
        display_name: Title drawn above the section
    """

    id: str
    display_name: str


@dataclass(frozen=True)
class ExportResult:
    """
    Outcome of an export (immutable).

    Attributes:
        path: Where the document was written
        page_count: Pages in the document
        exported_sections: Region ids included, in document order
        skipped_sections: Region ids skipped because they were missing
    """

    path: Path
    page_count: int
    exported_sections: tuple[str, ...]
    skipped_sections: tuple[str, ...] = ()


class DocumentAssembler:
    """
    Turns captured regions into a paginated document.

    Attributes:
        rasterizer: Source of region rasters
        encoder_factory: Creates a fresh encoder per export
        clock: Time source for the generation timestamp

    Example:
        >>> assembler = DocumentAssembler(DirectoryRasterizer(Path("screens")))
        >>> result = assembler.export_region("overview")
        >>> result.page_count
        2
    """

    def __init__(
        self,
        rasterizer: Rasterizer,
        *,
        output_dir: Optional[Path] = None,
        encoder_factory: Optional[EncoderFactory] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.rasterizer = rasterizer
        self.encoder_factory = encoder_factory or partial(create_encoder, output_dir=output_dir)
        self.clock = clock

    def export_region(
        self,
        region_id: str,
        options: Optional[ExportOptions] = None,
    ) -> ExportResult:
        """
        Export a single region. Fails fast.

        Args:
            region_id: Region to capture
            options: Export options (defaults if None)

        Returns:
            ExportResult for the written document

        Raises:
            ExportFailedError: On any failure, chained to the cause
        """
        options = options or ExportOptions()
        filename = options.resolve_filename(DEFAULT_REGION_FILENAME)
        start_time = time.perf_counter()
        logger.info(f"Exporting region {region_id!r} to {filename}")

        try:
            region = self._capture(region_id, options)
            encoder = self.encoder_factory(options)
            self._place_region(encoder, region, options, start_offset_mm=0.0, stamp=True)
            path = encoder.save(filename)
        except Exception as e:
            logger.exception(f"Error generating PDF for region {region_id!r}: {e}")
            raise ExportFailedError(REGION_FAILED_MESSAGE, region_id=region_id) from e

        elapsed = time.perf_counter() - start_time
        logger.info(f"Exported {encoder.page_count} pages to {path} in {elapsed:.2f}s")
        return ExportResult(path=path, page_count=encoder.page_count, exported_sections=(region_id,))

    def export_sections(
        self,
        sections: Iterable[RegionSection],
        options: Optional[ExportOptions] = None,
    ) -> ExportResult:
        """
        Export several regions into one document, one titled section each.

        Missing regions are logged and skipped; any other failure aborts.

        Args:
            sections: Sections in document order
            options: Export options (defaults if None)

        Returns:
            ExportResult listing exported and skipped sections

        Raises:
            ExportFailedError: On capture or encoder failure
        """
        options = options or ExportOptions()
        sections = list(sections)
        filename = options.resolve_filename(DEFAULT_SECTIONS_FILENAME)
        start_time = time.perf_counter()
        logger.info(f"Exporting {len(sections)} sections to {filename}")

        exported: list[str] = []
        skipped: list[str] = []
        try:
            encoder = self.encoder_factory(options)
            for section in sections:
                try:
                    region = self._capture(section.id, options)
                except RegionNotFoundError:
                    logger.warning(f'Element with id "{section.id}" not found, skipping...')
                    skipped.append(section.id)
                    continue

                is_first = not exported
                if not is_first:
                    encoder.new_page()
                encoder.draw_text(
                    section.display_name, TITLE_X_MM, TITLE_Y_MM, TITLE_FONT_SIZE, color=BLACK
                )
                self._place_region(
                    encoder, region, options, start_offset_mm=TITLE_BLOCK_MM, stamp=is_first
                )
                exported.append(section.id)
                logger.debug(f"Section {section.id!r} ends on page {encoder.page_count}")

            if not exported:
                logger.warning("No sections were exported; writing an empty document")
            path = encoder.save(filename)
        except Exception as e:
            logger.exception(f"Error generating PDF for sections: {e}")
            raise ExportFailedError(SECTIONS_FAILED_MESSAGE) from e

        elapsed = time.perf_counter() - start_time
        logger.info(
            f"Exported {len(exported)}/{len(sections)} sections "
            f"({encoder.page_count} pages) to {path} in {elapsed:.2f}s"
        )
        return ExportResult(
            path=path,
            page_count=encoder.page_count,
            exported_sections=tuple(exported),
            skipped_sections=tuple(skipped),
        )

    def _capture(self, region_id: str, options: ExportOptions) -> CapturedRegion:
        """Capture a region at its full content extent."""
        width, height = self.rasterizer.content_extent(region_id)
        settings = CaptureSettings(
            scale=options.scale,
            cross_origin_allowed=True,
            width=width,
            height=height,
        )
        return self.rasterizer.capture(region_id, settings)

    def _place_region(
        self,
        encoder: DocumentEncoder,
        region: CapturedRegion,
        options: ExportOptions,
        *,
        start_offset_mm: float,
        stamp: bool,
    ) -> None:
        """
        Draw a region's slices starting on the encoder's current page.

        When stamp is True the generation timestamp goes on that page.
        """
        spec = options.page_spec
        height_mm = image_height_mm(region.pixel_width, region.pixel_height, spec)

        for index, page_slice in enumerate(
            plan_slices(region.pixel_width, region.pixel_height, options, start_offset_mm)
        ):
            if index > 0 and page_slice.is_page_start:
                encoder.new_page()
            logger.debug(
                f"Page {encoder.page_count}: image band "
                f"{page_slice.source_offset_mm:.2f}-{page_slice.source_bottom_mm:.2f}mm "
                f"at y={page_slice.dest_offset_mm:.2f}mm"
            )
            encoder.draw_image(region.image, 0, page_slice.dest_offset_mm, spec.width_mm, height_mm)
            if index == 0 and stamp:
                self._stamp_timestamp(encoder)

    def _stamp_timestamp(self, encoder: DocumentEncoder) -> None:
        timestamp = self.clock().strftime("%Y-%m-%d %H:%M:%S")
        encoder.draw_text(
            f"Generated on: {timestamp}",
            TIMESTAMP_X_MM,
            TIMESTAMP_Y_MM,
            TIMESTAMP_FONT_SIZE,
            color=GREY,
        )


def export_region(
    region_id: str,
    options: Optional[ExportOptions] = None,
    *,
    rasterizer: Rasterizer,
    output_dir: Optional[Path] = None,
    encoder_factory: Optional[EncoderFactory] = None,
) -> ExportResult:
    """
    Export one region with a one-shot DocumentAssembler.

    Example:
        >>> export_region("overview", ExportOptions(filename="overview.pdf"),
        ...               rasterizer=DirectoryRasterizer(Path("screens")))
    """
    assembler = DocumentAssembler(
        rasterizer, output_dir=output_dir, encoder_factory=encoder_factory
    )
    return assembler.export_region(region_id, options)


def export_sections(
    sections: Iterable[RegionSection],
    options: Optional[ExportOptions] = None,
    *,
    rasterizer: Rasterizer,
    output_dir: Optional[Path] = None,
    encoder_factory: Optional[EncoderFactory] = None,
) -> ExportResult:
    """Export several titled regions with a one-shot DocumentAssembler."""
    assembler = DocumentAssembler(
        rasterizer, output_dir=output_dir, encoder_factory=encoder_factory
    )
    return assembler.export_sections(sections, options)
