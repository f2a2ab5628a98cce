"""
Module: exporter.output

Purpose:
    Document encoding for export.
    Turns page-drawing commands into a persisted PDF using ReportLab.

Key Classes:
    - DocumentEncoder: Abstract encoder interface
    - ReportLabEncoder: PDF encoder
    - EncodingError: Encoder failure

Dependencies:
    - reportlab: PDF generation
    - PIL: Image handling

Used By:
    - exporter.controller: Document assembly
"""

from .encoder import DocumentEncoder, EncodingError, BLACK, GREY
from .renderer import ReportLabEncoder, create_encoder

__all__ = [
    "DocumentEncoder",
    "EncodingError",
    "ReportLabEncoder",
    "create_encoder",
    "BLACK",
    "GREY",
]
