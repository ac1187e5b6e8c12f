import httpx
import openai
import pytest

from itinerary_ai_core.controller import IMAGE_FAILURE_MESSAGE, UPLOAD_FAILURE_MESSAGE
from itinerary_ai_core.errors import (
    AuthFailure,
    ExportFailure,
    MalformedModelOutput,
    RateLimited,
)
from itinerary_ai_core.llm_client import classify_openai_error

from conftest import FakeImageGenerator, FakeJpegExporter, FakePdfExporter, FakeStructurer


def _openai_status_error(cls, status):
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    response = httpx.Response(status, request=request)
    return cls("upstream error", response=response, body=None)


# ============================================================
# Upload
# ============================================================

def test_ladakh_upload_goes_to_edit(make_controller, structurer):
    controller = make_controller()

    state = controller.begin_upload("ladakh.txt", b"Day 1: Arrive in Ladakh. Acclimatize.")

    assert state.step == "edit"
    assert state.error is None
    assert not state.is_loading
    assert state.package_data.itinerary[0].activities == ("Arrive in Ladakh", "Acclimatize")
    assert structurer.calls == ["Day 1: Arrive in Ladakh. Acclimatize."]


@pytest.mark.parametrize("filename", ["trip.docx", "trip.doc", "trip.txt"])
def test_valid_extension_reaches_edit_or_reports_error(make_controller, filename):
    controller = make_controller(extractor=lambda name, data: "Day 1")
    state = controller.begin_upload(filename, b"Day 1")
    assert (state.step == "edit" and state.package_data is not None) or (
        state.step == "upload" and state.error
    )


@pytest.mark.parametrize("filename", ["trip.pdf", "trip.md", "trip", "photo.png"])
def test_unsupported_extension_never_calls_structurer(make_controller, structurer, filename):
    controller = make_controller()

    state = controller.begin_upload(filename, b"Day 1")

    assert state.step == "upload"
    assert state.error == "Please upload a .docx, .doc, or .txt file."
    assert structurer.calls == []


def test_rate_limit_keeps_upload_step(make_controller):
    error = classify_openai_error(_openai_status_error(openai.RateLimitError, 429))
    controller = make_controller(structurer=FakeStructurer(error=error))

    state = controller.begin_upload("trip.txt", b"Day 1")

    assert isinstance(error, RateLimited)
    assert state.step == "upload"
    assert "Rate limit" in state.error
    assert not state.is_loading


def test_auth_failure_opens_credential_hook(make_controller, credentials):
    controller = make_controller(structurer=FakeStructurer(error=AuthFailure(status=401)))

    state = controller.begin_upload("trip.txt", b"Day 1")

    assert state.error == AuthFailure.default_message
    assert credentials.opened == 1


def test_malformed_output_is_reported(make_controller):
    controller = make_controller(structurer=FakeStructurer(error=MalformedModelOutput()))
    state = controller.begin_upload("trip.txt", b"Day 1")
    assert state.error == MalformedModelOutput.default_message


def test_unexpected_exception_is_classified(make_controller):
    controller = make_controller(structurer=FakeStructurer(error=RuntimeError("socket closed")))
    state = controller.begin_upload("trip.txt", b"Day 1")
    assert state.step == "upload"
    assert state.error == UPLOAD_FAILURE_MESSAGE
    assert "socket closed" not in state.error


def test_empty_text_file_reports_empty_document(make_controller, structurer):
    controller = make_controller()
    state = controller.begin_upload("empty.txt", b"   \n")
    assert state.error
    assert structurer.calls == []


def test_upload_is_ignored_outside_upload_step(edit_controller):
    before = edit_controller.state
    assert edit_controller.begin_upload("other.txt", b"Day 1") is before


def test_retry_after_error_clears_it(make_controller):
    structurer = FakeStructurer(error=RateLimited())
    controller = make_controller(structurer=structurer)
    controller.begin_upload("trip.txt", b"Day 1")
    assert controller.state.error

    structurer.error = None
    state = controller.begin_upload("trip.txt", b"Day 1")
    assert state.step == "edit"
    assert state.error is None


# ============================================================
# Edición y suscripción
# ============================================================

def test_listeners_receive_each_new_state(edit_controller):
    seen = []
    unsubscribe = edit_controller.subscribe(seen.append)

    edit_controller.set_field("companyName", "Acme")
    edit_controller.set_activity(0, 9, "ignored")  # no-op, sin notificación
    unsubscribe()
    edit_controller.set_field("companyName", "Other")

    assert len(seen) == 1
    assert seen[0].package_data.company_name == "Acme"


def test_edit_operations(edit_controller):
    c = edit_controller
    c.set_day_field(0, "location", "Shimla Mall Road")
    c.add_activity(1)
    c.set_pricing_row(0, "value", "90000")
    c.add_list_item("exclusions")
    c.set_theme("wanderlust")
    c.set_style_field("accentColor", "#123456")

    pkg = c.state.package_data
    assert pkg.itinerary[0].location == "Shimla Mall Road"
    assert pkg.itinerary[1].activities[-1] == "New Activity Pointer"
    assert pkg.pricing[0].value == "90000"
    assert pkg.exclusions[-1] == "New item"
    assert pkg.theme == "wanderlust"
    assert pkg.styles.accent_color == "#123456"


def test_set_style_fields_is_all_or_nothing(edit_controller):
    before = edit_controller.state.package_data.styles

    with pytest.raises(ValueError):
        edit_controller.set_style_fields({"accentColor": "#00ff00", "headingStyle": "bold"})
    with pytest.raises(ValueError):
        edit_controller.set_style_fields({"accentColor": "#00ff00", "shadow": "1px"})
    assert edit_controller.state.package_data.styles == before

    styles = edit_controller.set_style_fields({"accentColor": "#00ff00", "bodyStyle": "italic"}).package_data.styles
    assert (styles.accent_color, styles.body_style) == ("#00ff00", "italic")


def test_select_credentials_opens_hook_and_dismisses(edit_controller, credentials):
    edit_controller.report_error(RateLimited())
    edit_controller.select_credentials()
    assert credentials.opened == 1
    assert edit_controller.state.error is None


# ============================================================
# Imágenes
# ============================================================

PNG = b"\x89PNG\r\n\x1a\n" + b"0" * 16


def test_image_in_preview_is_staged_until_confirmed(edit_controller):
    c = edit_controller
    c.go_to_preview()
    original = c.state.package_data.itinerary[1].image_url

    state = c.request_image_replace(1, "kaza.png", PNG, "image/png")

    assert state.pending_image is not None
    assert state.package_data.itinerary[1].image_url == original

    state = c.confirm_staged_image()
    assert state.package_data.itinerary[1].image_url.startswith("data:image/png;base64,")
    assert state.pending_image is None


def test_image_in_edit_is_applied_immediately(edit_controller):
    state = edit_controller.request_image_replace("logo", "logo.png", PNG)
    assert state.package_data.logo_url.startswith("data:image/png;base64,")
    assert state.pending_image is None


def test_oversized_image_is_rejected(edit_controller, monkeypatch):
    from itinerary_ai_core.config import get_settings

    monkeypatch.setenv("MAX_LOGO_BYTES", "10")
    get_settings.cache_clear()

    state = edit_controller.request_image_replace("logo", "logo.png", PNG)
    assert "too large" in state.error
    assert state.package_data.logo_url == ""


def test_non_image_is_rejected(edit_controller):
    state = edit_controller.request_image_replace("cover", "notes.txt", b"hello")
    assert state.error
    assert state.package_data.cover_image_url == ""


def test_image_upload_without_package_is_ignored(make_controller):
    controller = make_controller()
    before = controller.state
    assert controller.request_image_replace("cover", "c.png", PNG) is before


def test_regenerate_image_writes_directly(edit_controller, image_generator):
    c = edit_controller
    c.go_to_preview()
    c.open_regen_prompt(0)
    c.set_regen_prompt("sunset over the ridge")

    state = c.regenerate_image(0)

    assert state.package_data.itinerary[0].image_url == image_generator.result
    assert state.regen_index is None
    assert not state.is_loading
    assert image_generator.calls == [
        ("Shimla", "Shimla", "Arrive and settle in.", "sunset over the ridge")
    ]


def test_regenerate_uses_activities_when_no_description(edit_controller, image_generator):
    edit_controller.regenerate_image(1, custom_prompt="")
    location, title, description, prompt = image_generator.calls[0]
    assert description == "Ride to Kaza"
    assert prompt is None


def test_regenerate_checks_credentials_first(make_controller, credentials):
    credentials.has_key = False
    controller = make_controller(structurer=FakeStructurer())
    controller.begin_upload("ladakh.txt", b"Day 1")

    controller.regenerate_image(0)
    assert credentials.opened == 1


def test_regenerate_failure_sets_error(make_controller):
    controller = make_controller(image_generator=FakeImageGenerator(error=RateLimited()))
    controller.begin_upload("ladakh.txt", b"Day 1")

    state = controller.regenerate_image(0)

    assert state.error == RateLimited.default_message
    assert state.package_data.itinerary[0].image_url == ""
    assert not state.is_loading


def test_regenerate_auth_failure_opens_credential_hook(make_controller, credentials):
    controller = make_controller(image_generator=FakeImageGenerator(error=AuthFailure(status=403)))
    controller.begin_upload("ladakh.txt", b"Day 1")
    assert credentials.opened == 0

    state = controller.regenerate_image(0)

    assert credentials.opened == 1
    assert state.error == AuthFailure.default_message
    assert state.package_data.itinerary[0].image_url == ""
    assert not state.is_loading


def test_regenerate_unexpected_exception_hides_details(make_controller):
    controller = make_controller(image_generator=FakeImageGenerator(error=RuntimeError("tls handshake failed")))
    controller.begin_upload("ladakh.txt", b"Day 1")

    state = controller.regenerate_image(0)

    assert state.error == IMAGE_FAILURE_MESSAGE
    assert state.package_data.itinerary[0].image_url == ""


def test_regenerate_out_of_range_is_noop(edit_controller, image_generator):
    before = edit_controller.state
    assert edit_controller.regenerate_image(7) is before
    assert image_generator.calls == []


# ============================================================
# Export
# ============================================================

def test_export_pdf(edit_controller, pdf_exporter):
    artifact = edit_controller.export_pdf("landscape")

    assert artifact.filename == "Spiti Circuit.pdf"
    assert artifact.media_type == "application/pdf"
    assert artifact.content.startswith(b"%PDF")
    html, orientation = pdf_exporter.calls[0]
    assert orientation == "landscape"
    assert "Spiti Circuit" in html
    assert not edit_controller.state.is_loading


def test_export_flyer_jpeg(edit_controller, jpeg_exporter):
    artifact = edit_controller.export_flyer_jpeg()

    assert artifact.filename == "Spiti Circuit_Flyer.jpg"
    assert artifact.media_type == "image/jpeg"
    # solo la portada
    assert "Package Investment" not in jpeg_exporter.calls[0]


def test_export_failure_shows_generic_message(make_controller):
    controller = make_controller(
        structurer=FakeStructurer(),
        pdf_exporter=FakePdfExporter(error=ExportFailure("weasyprint exploded")),
        jpeg_exporter=FakeJpegExporter(error=OSError("disk")),
    )
    controller.begin_upload("ladakh.txt", b"Day 1")

    assert controller.export_pdf() is None
    assert controller.state.error == "Export failed. Please try again."

    controller.dismiss_error()
    assert controller.export_flyer_jpeg() is None
    assert controller.state.error == "Export failed. Please try again."
    assert not controller.state.is_loading


def test_export_without_package_returns_none(make_controller, pdf_exporter):
    assert make_controller().export_pdf() is None
    assert pdf_exporter.calls == []


def test_export_filename_falls_back_to_itinerary(edit_controller):
    edit_controller.set_field("packageName", "  ")
    assert edit_controller.export_pdf().filename == "Itinerary.pdf"
