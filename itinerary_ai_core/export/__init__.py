from __future__ import annotations

from .jpeg_flyer import JpegFlyerExporter
from .pdf_weasyprint import PdfWeasyprintExporter, page_css

__all__ = ["JpegFlyerExporter", "PdfWeasyprintExporter", "page_css"]
