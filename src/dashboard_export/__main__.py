"""
Command-line entry point for dashboard exports.

Usage:
    python -m dashboard_export region overview --images screens/
    python -m dashboard_export sections "overview=Overview" "users=User Analytics" --images screens/
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dashboard_export import __version__
from dashboard_export.exporter import (
    DirectoryRasterizer,
    DocumentAssembler,
    ExportFailedError,
    ExportOptions,
    Orientation,
    PageFormat,
    RegionSection,
    load_options,
)


def parse_section(value: str) -> RegionSection:
    """Parse "id=Display Name"; a bare id is its own title."""
    region_id, sep, name = value.partition("=")
    region_id = region_id.strip()
    if not region_id:
        raise argparse.ArgumentTypeError(f"Invalid section {value!r}: missing region id")
    return RegionSection(id=region_id, display_name=name.strip() if sep else region_id)


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--images", type=Path, required=True, help="Directory of region screenshots")
    common.add_argument("--pattern", default="{region_id}.png", help="Screenshot file name pattern")
    common.add_argument("--output-dir", type=Path, default=Path("."), help="Directory for the PDF")
    common.add_argument("--config", type=Path, help="JSON file with default export options")
    common.add_argument("--filename", help="Output file name")
    common.add_argument("--format", dest="page_format", choices=[f.value for f in PageFormat])
    common.add_argument("--orientation", choices=[o.value for o in Orientation])
    common.add_argument("--scale", type=float, help="Capture scale factor")
    common.add_argument("--quality", type=float, help="JPEG quality in (0, 1]")
    common.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    parser = argparse.ArgumentParser(
        prog="dashboard-export",
        description="Export dashboard regions to paginated PDF documents",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    region = sub.add_parser("region", parents=[common], help="Export a single region")
    region.add_argument("region_id", help="Region to export")

    sections = sub.add_parser("sections", parents=[common], help="Export titled sections")
    sections.add_argument("sections", nargs="+", type=parse_section, metavar="ID=NAME")
    return parser


def resolve_options(args: argparse.Namespace) -> ExportOptions:
    """Config file defaults, overridden by command-line flags."""
    base = load_options(args.config) if args.config else ExportOptions()
    return base.with_overrides(
        filename=args.filename,
        page_format=args.page_format,
        orientation=args.orientation,
        scale=args.scale,
        quality=args.quality,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )

    try:
        options = resolve_options(args)
        rasterizer = DirectoryRasterizer(args.images, args.pattern)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    with rasterizer:
        assembler = DocumentAssembler(rasterizer, output_dir=args.output_dir)
        try:
            if args.command == "region":
                result = assembler.export_region(args.region_id, options)
            else:
                result = assembler.export_sections(args.sections, options)
        except ExportFailedError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    for skipped in result.skipped_sections:
        print(f"Skipped missing section: {skipped}", file=sys.stderr)
    print(f"Wrote {result.page_count} page(s) to {result.path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
