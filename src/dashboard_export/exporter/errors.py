"""
Module: exporter.errors

Purpose:
    Root of the export exception hierarchy.

Key Classes:
    - ExportError: Base class for all export failures

Used By:
    - exporter.capture.rasterizer: RegionNotFoundError
    - exporter.output.encoder: EncodingError
    - exporter.controller: ExportFailedError
"""


class ExportError(Exception):
    """Base class for export failures."""
    pass
