import pytest

from itinerary_ai_core.config import get_settings
from itinerary_ai_core.controller import AppController
from itinerary_ai_core.doc_engine import build_travel_package


LADAKH = {
    "packageName": "Ladakh Expedition",
    "destination": "Ladakh",
    "itinerary": [
        {
            "day": 1,
            "title": "Arrival",
            "location": "Leh",
            "activities": ["Arrive in Ladakh", "Acclimatize"],
        }
    ],
}

SPITI = {
    "packageName": "Spiti Circuit",
    "destination": "Himachal",
    "duration": "8 Days",
    "currency": "INR",
    "pricing": [
        {"label": "Solo Bike Price", "value": "85000"},
        {"label": "Dual Rider Price", "value": "120000"},
    ],
    "inclusions": ["Fuel", "Stays"],
    "exclusions": ["Flights"],
    "itinerary": [
        {
            "day": 1,
            "title": "Shimla",
            "location": "Shimla",
            "activities": ["Bike allotment", "Briefing"],
            "description": "Arrive and settle in.",
        },
        {
            "day": 2,
            "title": "Into the valley",
            "location": "Kaza",
            "activities": ["Ride to Kaza"],
            "imageUrl": "https://example.com/kaza.jpg",
        },
    ],
}


class FakeCredentials:
    def __init__(self, has_key=True):
        self.has_key = has_key
        self.opened = 0

    def has_selected_key(self):
        return self.has_key

    def open_select_key(self):
        self.opened += 1


class FakeStructurer:
    def __init__(self, result=None, error=None):
        self.result = result if result is not None else LADAKH
        self.error = error
        self.calls = []

    def __call__(self, text):
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        return self.result


class FakeImageGenerator:
    def __init__(self, result="data:image/png;base64,QUJD", error=None):
        self.result = result
        self.error = error
        self.calls = []

    def __call__(self, location, title, description, custom_prompt=None):
        self.calls.append((location, title, description, custom_prompt))
        if self.error is not None:
            raise self.error
        return self.result


class FakePdfExporter:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def export_brochure(self, html, orientation="portrait"):
        self.calls.append((html, orientation))
        if self.error is not None:
            raise self.error
        return b"%PDF-1.7 fake"


class FakeJpegExporter:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def export_flyer(self, html):
        self.calls.append(html)
        if self.error is not None:
            raise self.error
        return b"\xff\xd8\xff fake"


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Cada test arranca con la configuración por defecto."""
    for name in (
        "OPENAI_API_KEY",
        "OPENAI_MODEL_TEXT",
        "OPENAI_MODEL_IMAGE",
        "MAX_LOGO_BYTES",
        "MAX_COVER_BYTES",
        "MAX_DAY_IMAGE_BYTES",
        "FLYER_JPEG_DPI",
        "PDF_ORIENTATION",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def spiti_package():
    return build_travel_package(SPITI)


@pytest.fixture
def credentials():
    return FakeCredentials()


@pytest.fixture
def structurer():
    return FakeStructurer()


@pytest.fixture
def image_generator():
    return FakeImageGenerator()


@pytest.fixture
def pdf_exporter():
    return FakePdfExporter()


@pytest.fixture
def jpeg_exporter():
    return FakeJpegExporter()


@pytest.fixture
def make_controller(credentials, structurer, image_generator, pdf_exporter, jpeg_exporter):
    """Fábrica de controllers con todos los adaptadores reemplazados por fakes."""

    def _make(**overrides):
        kwargs = dict(
            structurer=structurer,
            image_generator=image_generator,
            credentials=credentials,
            pdf_exporter=pdf_exporter,
            jpeg_exporter=jpeg_exporter,
        )
        kwargs.update(overrides)
        return AppController(**kwargs)

    return _make


@pytest.fixture
def edit_controller(make_controller):
    """Controller ya en `edit` con el paquete SPITI cargado."""
    controller = make_controller(structurer=FakeStructurer(SPITI))
    controller.begin_upload("spiti.txt", b"Day 1: Shimla")
    assert controller.state.step == "edit"
    return controller


