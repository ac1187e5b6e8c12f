"""
itinerary_ai_core.export.pdf_weasyprint
=======================================

Exportador HTML → PDF usando WeasyPrint.

El brochure ya viene renderizado como HTML completo (con el CSS del tema) por
`renderer.BrochureRenderer.render_brochure_document`. Acá solo se fija la
página:

  - tamaño A4, orientación portrait | landscape
  - márgenes 0 (la portada va a sangre)

Requisitos
----------
- weasyprint instalado en el entorno: `pip install weasyprint`
- Las imágenes del documento son data URLs o URLs remotas; WeasyPrint resuelve
  ambas sin servidor local.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from ..errors import ExportFailure

logger = logging.getLogger(__name__)

ORIENTATIONS = ("portrait", "landscape")


def page_css(orientation: str = "portrait") -> str:
    """CSS de página: A4 en la orientación pedida, sin márgenes."""
    if orientation not in ORIENTATIONS:
        raise ValueError(f"Orientación inválida: {orientation!r}")
    return f"@page {{ size: A4 {orientation}; margin: 0; }}"


@dataclass
class PdfWeasyprintExporter:
    """
    Exportador PDF basado en WeasyPrint (HTML → PDF nativo).

    Atributos
    ---------
    name:
        Identificador del exportador.
    base_url:
        URL base para resolver recursos relativos. Si es None, WeasyPrint usa
        el sistema de archivos local.
    """

    name: str = "pdf_weasyprint"
    base_url: str | None = None

    def export_brochure(self, html_content: str, orientation: str = "portrait") -> bytes:
        """
        Genera el PDF del brochure en memoria.

        Raises
        ------
        ExportFailure
            Si WeasyPrint no está instalado o falla al generar el PDF.
        """
        try:
            from weasyprint import CSS, HTML
        except ImportError as e:
            raise ExportFailure(
                "WeasyPrint no está instalado. Ejecutá: pip install weasyprint"
            ) from e

        try:
            css = CSS(string=page_css(orientation))
            pdf = HTML(string=html_content, base_url=self.base_url).write_pdf(stylesheets=[css])
        except Exception as e:
            raise ExportFailure(f"WeasyPrint falló al generar el PDF: {e}") from e

        logger.info("📄 PDF generado (%s, %d bytes)", orientation, len(pdf))
        return pdf
