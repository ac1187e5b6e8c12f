"""
itinerary_ai_core.export.jpeg_flyer
===================================

Exportador de la portada (flyer) a JPEG de alta resolución.

WeasyPrint ya no rasteriza, así que el flujo es:

  HTML de la portada --WeasyPrint--> PDF de 1 página A4
                      --PyMuPDF-->   pixmap RGB a `dpi`
                      --Pillow-->    JPEG calidad máxima
"""
from __future__ import annotations

import io
import logging
from dataclasses import dataclass

import fitz
from PIL import Image

from ..config import get_settings
from ..errors import ExportFailure
from .pdf_weasyprint import PdfWeasyprintExporter

logger = logging.getLogger(__name__)


@dataclass
class JpegFlyerExporter:
    """
    Atributos
    ---------
    dpi:
        Resolución del raster. None → `Settings.flyer_jpeg_dpi`.
    quality:
        Calidad JPEG de Pillow (100 = máxima).
    """

    name: str = "jpeg_flyer"
    dpi: int | None = None
    quality: int = 100

    def export_flyer(self, html_content: str) -> bytes:
        """
        Rasteriza la primera página del HTML de la portada.

        Raises
        ------
        ExportFailure
            Si falla cualquiera de las tres etapas.
        """
        pdf_bytes = PdfWeasyprintExporter().export_brochure(html_content, orientation="portrait")
        dpi = self.dpi or get_settings().flyer_jpeg_dpi

        try:
            with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
                if doc.page_count == 0:
                    raise ExportFailure("La portada no generó ninguna página.")
                pix = doc.load_page(0).get_pixmap(dpi=dpi, alpha=False)
                img = Image.frombytes("RGB", [pix.width, pix.height], pix.samples)

            buf = io.BytesIO()
            img.save(buf, format="JPEG", quality=self.quality, subsampling=0)
        except ExportFailure:
            raise
        except Exception as e:
            raise ExportFailure(f"No se pudo rasterizar la portada: {e}") from e

        logger.info("🖼️ Flyer JPEG generado (%dx%d @ %d dpi)", img.width, img.height, dpi)
        return buf.getvalue()
