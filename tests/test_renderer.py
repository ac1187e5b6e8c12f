from dataclasses import replace

import pytest

from itinerary_ai_core.doc_engine import build_travel_package
from itinerary_ai_core.renderer import (
    BrochureRenderer,
    cover_image,
    export_basename,
    theme_css,
)
from itinerary_ai_core.state import AppState, PendingImage
from itinerary_ai_core.themes import VANGUARD


@pytest.fixture
def renderer():
    return BrochureRenderer()


def test_upload_view(renderer):
    html = renderer.render_page(AppState())
    assert 'action="/upload"' in html
    assert 'accept=".doc,.docx,.txt"' in html
    assert "Preview Itinerary" not in html


def test_error_banner_has_dismiss_and_update_key(renderer):
    html = renderer.render_page(AppState(error="Rate limit <exceeded>"))
    assert "Rate limit &lt;exceeded&gt;" in html
    assert 'action="/error/dismiss"' in html
    assert "Update API Key" in html


def test_loading_overlay(renderer):
    assert "Processing..." in renderer.render_page(AppState(is_loading=True))
    assert "Processing..." not in renderer.render_page(AppState())


def test_edit_view(renderer, spiti_package):
    html = renderer.render_page(AppState(step="edit", package_data=spiti_package))

    assert "Preview Itinerary" in html
    assert 'action="/package/fields"' in html
    assert 'action="/days/1/activities/0/remove"' in html
    assert 'action="/pricing/1"' in html
    assert 'action="/lists/inclusions/1/remove"' in html
    assert "Modern Vanguard" in html
    assert 'value="Bike allotment"' in html


def test_preview_view(renderer, spiti_package):
    html = renderer.render_page(AppState(step="preview", package_data=spiti_package))

    assert "Back to Editor" in html
    assert "Download PDF" in html
    assert "Export Flyer (JPEG)" in html
    assert 'action="/days/0/regenerate/open"' in html
    assert "Upload Custom Cover" in html


def test_preview_staged_image_banner(renderer, spiti_package):
    state = AppState(
        step="preview",
        package_data=spiti_package,
        pending_image=PendingImage(slot=1, data_url="data:image/png;base64,TkVX"),
    )
    html = renderer.render_page(state)
    assert "Replace the Day 02 image?" in html
    assert 'action="/images/staged/confirm"' in html
    assert 'action="/images/staged/cancel"' in html


def test_preview_regen_prompt(renderer, spiti_package):
    state = AppState(step="preview", package_data=spiti_package, regen_index=1, regen_prompt="dusk")
    html = renderer.render_page(state)
    assert "AI Regeneration Prompt" in html
    assert 'action="/days/1/regenerate"' in html
    assert ">dusk</textarea>" in html


def test_brochure_sections_in_order(renderer, spiti_package):
    html = renderer.render_brochure_document(spiti_package)

    markers = [
        'class="cover"',
        "Journey Beyond Boundaries",
        'id="day-0"',
        'id="day-1"',
        "Package Investment",
        "Inclusions",
        "Exclusions",
        "Adventure Co.",
    ]
    positions = [html.index(m) for m in markers]
    assert positions == sorted(positions)


def test_brochure_has_no_editing_controls(renderer, spiti_package):
    html = renderer.render_brochure_document(spiti_package)
    assert "<form" not in html
    assert "Regenerate" not in html


def test_brochure_pricing_column(renderer, spiti_package):
    pkg = replace(spiti_package, pricing=spiti_package.pricing + (replace(spiti_package.pricing[0], value=""),))
    html = renderer.render_brochure_document(pkg)
    assert "INR 85000" in html
    assert "INR -" in html


def test_brochure_day_labels(renderer, spiti_package):
    html = renderer.render_brochure_document(spiti_package)
    assert "Day 01" in html
    assert "Day 02" in html
    assert "No Image Selected" in html


def test_brochure_orientation_changes_cover_height(renderer, spiti_package):
    assert "height: 297mm" in renderer.render_brochure_document(spiti_package, "portrait")
    assert "height: 210mm" in renderer.render_brochure_document(spiti_package, "landscape")


def test_footer_uses_company_and_contact(renderer, spiti_package):
    pkg = replace(spiti_package, company_name="Acme Moto", contact_details="hello@acme.test")
    html = renderer.render_brochure_document(pkg)
    assert "Acme Moto" in html
    assert "hello@acme.test" in html
    assert "Adventure Co." not in html


def test_flyer_is_cover_only(renderer, spiti_package):
    html = renderer.render_flyer_document(spiti_package)
    assert 'id="flyer"' in html
    assert "Journey Beyond Boundaries" not in html
    assert "Package Investment" not in html


def test_cover_image_fallbacks(spiti_package):
    assert cover_image(spiti_package) == ""
    with_first = replace(
        spiti_package,
        itinerary=(replace(spiti_package.itinerary[0], image_url="first.jpg"),) + spiti_package.itinerary[1:],
    )
    assert cover_image(with_first) == "first.jpg"
    assert cover_image(replace(with_first, cover_image_url="cover.jpg")) == "cover.jpg"


def test_user_text_is_escaped(renderer):
    pkg = build_travel_package({"packageName": "<script>alert(1)</script>"})
    html = renderer.render_brochure_document(pkg)
    assert "<script>" not in html
    assert "&lt;script&gt;" in html


def test_theme_css_cannot_break_out(spiti_package):
    styles = replace(VANGUARD, heading_font="Inter'; } body { display:none")
    css = theme_css(styles)
    assert "display:none" in css  # queda como texto dentro del nombre de fuente
    assert css.count("{") == css.count("}") == 3


@pytest.mark.parametrize(
    "name, expected",
    [("Spiti Circuit", "Spiti Circuit"), ("  ", "Itinerary"), ("Leh/Ladakh: 2025", "Leh_Ladakh_ 2025")],
)
def test_export_basename(name, expected):
    pkg = replace(build_travel_package({}), package_name=name)
    assert export_basename(pkg) == expected
