import sys
from types import ModuleType

import fitz
import pytest

from itinerary_ai_core.errors import ExportFailure
from itinerary_ai_core.export import JpegFlyerExporter, PdfWeasyprintExporter, page_css


def _one_page_pdf():
    doc = fitz.open()
    page = doc.new_page(width=595, height=842)
    page.insert_text((72, 72), "Spiti Circuit")
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def fake_weasyprint(monkeypatch):
    """Reemplaza weasyprint por un módulo mínimo que registra las llamadas."""
    calls = {}
    module = ModuleType("weasyprint")

    class CSS:
        def __init__(self, string):
            calls["css"] = string

    class HTML:
        def __init__(self, string, base_url=None):
            calls["html"] = string

        def write_pdf(self, stylesheets=None):
            return b"%PDF-1.7 fake"

    module.CSS = CSS
    module.HTML = HTML
    monkeypatch.setitem(sys.modules, "weasyprint", module)
    return calls


@pytest.mark.parametrize("orientation", ["portrait", "landscape"])
def test_page_css(orientation):
    assert page_css(orientation) == f"@page {{ size: A4 {orientation}; margin: 0; }}"


def test_page_css_rejects_unknown_orientation():
    with pytest.raises(ValueError):
        page_css("square")


def test_pdf_exporter_sets_page(fake_weasyprint):
    pdf = PdfWeasyprintExporter().export_brochure("<p>hola</p>", orientation="landscape")

    assert pdf.startswith(b"%PDF")
    assert fake_weasyprint["css"] == "@page { size: A4 landscape; margin: 0; }"
    assert fake_weasyprint["html"] == "<p>hola</p>"


def test_pdf_exporter_wraps_failures(fake_weasyprint):
    with pytest.raises(ExportFailure):
        PdfWeasyprintExporter().export_brochure("<p/>", orientation="diagonal")


def test_jpeg_flyer_rasterizes_first_page(monkeypatch):
    monkeypatch.setattr(
        PdfWeasyprintExporter, "export_brochure", lambda self, html, orientation="portrait": _one_page_pdf()
    )

    jpeg = JpegFlyerExporter(dpi=36).export_flyer("<div>flyer</div>")

    assert jpeg[:2] == b"\xff\xd8"


def test_jpeg_flyer_wraps_raster_errors(monkeypatch):
    monkeypatch.setattr(
        PdfWeasyprintExporter, "export_brochure", lambda self, html, orientation="portrait": b"not a pdf"
    )
    with pytest.raises(ExportFailure):
        JpegFlyerExporter(dpi=36).export_flyer("<div/>")
