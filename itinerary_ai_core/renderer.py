"""
Renderer HTML del brochure y de la página de la app.

Tres vistas mutuamente excluyentes según `AppState.step`:

- upload:  pedido de archivo (.docx / .doc / .txt)
- edit:    formulario de edición (branding, estilo, precios, listas, días)
- preview: el brochure tal cual se exporta, con los controles para cambiar
           imágenes (subir / regenerar con IA) encima

El brochure se compone SIEMPRE en este orden: portada (flyer), intro, un bloque
por día, precios, incluye/no incluye, pie. `render_brochure_document` y
`render_flyer_document` devuelven documentos HTML autónomos, sin controles,
listos para WeasyPrint.

Los formularios postean a las rutas de `api/routes/` (editor, images, exports).
"""

from __future__ import annotations

import re
from datetime import date
from html import escape
from typing import List, Optional

from .domain_models import ItineraryDay, ThemeStyles, TravelPackage
from .ingest import SUPPORTED_EXT
from .state import AppState
from .themes import FONT_OPTIONS, THEME_LABELS, WEIGHT_OPTIONS

COVER_HEIGHT = {"portrait": "297mm", "landscape": "210mm"}

INTRO_TITLE = "Journey Beyond Boundaries"
INTRO_TEXT = (
    "Welcome to a road-trip redefined. We've captured the essence of the path ahead "
    "in these curated pointers, ensuring every day is a milestone of adventure."
)
DEFAULT_COMPANY = "Adventure Co."

_BROCHURE_CSS = """
* { box-sizing: border-box; }
.brochure { margin: 0; padding: 0; }
.brochure .cover { position: relative; width: 100%; overflow: hidden; color: #fff;
  background: #18181b; page-break-after: always; }
.brochure .cover img.cover-bg { position: absolute; top: 0; left: 0; width: 100%; height: 100%;
  object-fit: cover; }
.brochure .cover .shade { position: absolute; top: 0; left: 0; right: 0; bottom: 0; }
.brochure .cover .cover-body { position: absolute; top: 0; left: 0; right: 0; bottom: 0;
  padding: 24mm; }
.brochure .cover .brand { display: flex; justify-content: space-between; align-items: flex-start; }
.brochure .cover .brand img { height: 16mm; }
.brochure .cover .company { font-size: 9pt; letter-spacing: 0.4em; text-transform: uppercase;
  font-weight: 900; }
.brochure .cover .titles { position: absolute; left: 24mm; right: 24mm; bottom: 24mm; }
.brochure .cover h1 { font-size: 48pt; line-height: 1; text-transform: uppercase; margin: 0 0 8mm; }
.brochure .cover .rule { width: 24mm; height: 1mm; background: #fff; margin-bottom: 10mm; }
.brochure .cover .facts { display: flex; gap: 20mm; }
.brochure .cover .facts .k { font-size: 7pt; letter-spacing: 0.2em; text-transform: uppercase;
  opacity: 0.6; margin: 0 0 2mm; }
.brochure .cover .facts .v { font-size: 20pt; font-weight: 300; margin: 0; }
.brochure .intro { text-align: center; padding: 18mm 24mm; }
.brochure .intro h2 { font-size: 30pt; margin: 0 0 8mm; }
.brochure .intro p { font-size: 12pt; line-height: 1.7; opacity: 0.8; }
.brochure .day { padding: 12mm 20mm; page-break-inside: avoid; }
.brochure .day .label { font-size: 8pt; letter-spacing: 0.2em; text-transform: uppercase;
  opacity: 0.4; font-weight: 900; }
.brochure .day h3 { font-size: 28pt; margin: 2mm 0 6mm; }
.brochure .day .hero { position: relative; width: 100%; aspect-ratio: 16 / 9; overflow: hidden;
  background: #f4f4f5; }
.brochure .day .hero img { width: 100%; height: 100%; object-fit: cover; }
.brochure .day .hero .empty { text-align: center; padding-top: 25%; color: #d4d4d8;
  font-size: 9pt; letter-spacing: 0.2em; text-transform: uppercase; }
.brochure .day .location { margin: 5mm 0; font-size: 8pt; letter-spacing: 0.3em;
  text-transform: uppercase; font-weight: 900; opacity: 0.5; }
.brochure .day ul.activities { list-style: none; padding: 0; margin: 0; }
.brochure .day ul.activities li { margin: 0 0 3mm; font-size: 12pt; line-height: 1.6; }
.brochure .day ul.activities li::before { content: "\\2022"; opacity: 0.3; margin-right: 5mm; }
.brochure .day .description { font-style: italic; opacity: 0.6; border-left: 2px solid #e4e4e7;
  padding-left: 8mm; margin-top: 6mm; text-align: justify; }
.brochure .pricing { padding: 16mm 30mm; background: #fafafa; border-top: 1px solid #f4f4f5;
  page-break-inside: avoid; }
.brochure .pricing h3 { font-size: 24pt; font-style: italic; border-bottom: 1px solid;
  padding-bottom: 3mm; margin: 0 0 10mm; }
.brochure .pricing .row { display: flex; justify-content: space-between; align-items: baseline;
  border-bottom: 1px solid #e4e4e7; padding: 3mm 0; }
.brochure .pricing .row .k { font-size: 8pt; letter-spacing: 0.2em; text-transform: uppercase;
  font-weight: 900; opacity: 0.4; }
.brochure .pricing .row .v { font-size: 16pt; font-weight: 300; text-align: right; }
.brochure .logistics { display: flex; gap: 16mm; padding: 16mm 20mm; page-break-inside: avoid; }
.brochure .logistics > div { flex: 1; }
.brochure .logistics h4 { font-size: 8pt; letter-spacing: 0.2em; text-transform: uppercase;
  font-weight: 900; opacity: 0.3; border-bottom: 1px solid #e4e4e7; padding-bottom: 2mm; }
.brochure .logistics ul { list-style: none; padding: 0; }
.brochure .logistics li { font-size: 10pt; margin: 0 0 3mm; }
.brochure .logistics li .mark { opacity: 0.2; margin-right: 3mm; }
.brochure .logistics .exclusions li { opacity: 0.6; }
.brochure .footer { text-align: center; border-top: 1px solid #f4f4f5; padding: 16mm 20mm; }
.brochure .footer .company { font-size: 22pt; font-style: italic; margin: 0 0 4mm; }
.brochure .footer .contact, .brochure .footer .terms { font-size: 9pt; opacity: 0.6;
  white-space: pre-line; }
.brochure .footer .legal { font-size: 6pt; letter-spacing: 0.5em; text-transform: uppercase;
  opacity: 0.3; font-weight: 900; }
"""

_APP_CSS = """
body { margin: 0; font-family: 'Helvetica Neue', Arial, sans-serif; color: #18181b; background: #fff; }
header.app { display: flex; justify-content: space-between; align-items: center; padding: 16px 32px;
  border-bottom: 1px solid #e4e4e7; position: sticky; top: 0; background: #fff; z-index: 50; }
header.app h1 { font-family: Georgia, serif; text-transform: uppercase; letter-spacing: -0.02em; margin: 0; }
header.app .actions { display: flex; gap: 12px; align-items: center; }
main { max-width: 1100px; margin: 32px auto; padding: 0 24px; }
button, .btn { background: #000; color: #fff; border: 0; padding: 8px 18px; border-radius: 6px;
  cursor: pointer; font-size: 13px; text-decoration: none; }
.btn-secondary { background: #fff; color: #000; border: 1px solid #d4d4d8; }
.error { background: #fef2f2; border: 1px solid #fecaca; color: #b91c1c; padding: 12px 20px;
  border-radius: 8px; display: flex; justify-content: space-between; align-items: center; margin-bottom: 24px; }
.error form { display: inline; }
.loading { position: fixed; top: 0; left: 0; right: 0; bottom: 0; background: rgba(255,255,255,0.95);
  display: flex; align-items: center; justify-content: center; font-family: Georgia, serif;
  font-style: italic; font-size: 20px; z-index: 100; }
.card { border: 1px solid #f4f4f5; border-radius: 12px; padding: 24px; margin-bottom: 24px; }
.card h3 { font-family: Georgia, serif; border-bottom: 1px solid #f4f4f5; padding-bottom: 12px; margin-top: 0; }
.upload { text-align: center; border: 2px dashed #e4e4e7; max-width: 640px; margin: 60px auto; padding: 60px; }
.grid { display: grid; grid-template-columns: 1fr 2fr; gap: 32px; }
label.field { display: block; font-size: 10px; font-weight: 900; letter-spacing: 0.15em;
  text-transform: uppercase; color: #a1a1aa; margin: 12px 0 4px; }
input[type=text], textarea, select { width: 100%; padding: 8px; border: 1px solid #f4f4f5; border-radius: 6px; }
.inline { display: flex; gap: 8px; align-items: center; margin-bottom: 6px; }
.inline form { display: flex; gap: 8px; flex: 1; }
.theme-active { background: #000; color: #fff; }
.thumb { max-width: 200px; max-height: 120px; object-fit: cover; display: block; margin: 8px 0; }
.staged { background: #fffbeb; border: 1px solid #fde68a; padding: 16px; border-radius: 8px; margin-bottom: 24px;
  display: flex; gap: 16px; align-items: center; }
.preview-wrap { display: flex; justify-content: center; }
.preview-wrap .brochure { width: 210mm; box-shadow: 0 20px 50px rgba(0,0,0,0.15); }
.overlay { margin: 8px 0; display: flex; gap: 8px; flex-wrap: wrap; }
.overlay textarea { height: 70px; }
"""


# ============================================================
# Helpers
# ============================================================

def _e(value: object) -> str:
    return escape("" if value is None else str(value), quote=True)


def _css_value(value: str) -> str:
    # Los estilos son editables: sin llaves/; no se puede salir de la declaración
    return re.sub(r"[;{}<>\"'\\]", "", value or "").strip()


def export_basename(package: Optional[TravelPackage]) -> str:
    """Nombre base de los archivos exportados (sin extensión)."""
    name = (package.package_name if package else "").strip() or "Itinerary"
    return re.sub(r'[\\/:*?"<>|\x00-\x1f]', "_", name)


def day_label(day: ItineraryDay) -> str:
    return f"Day {day.day:02d}"


def cover_image(package: TravelPackage) -> str:
    """Portada propia, o la imagen del primer día, o "" (fondo liso)."""
    if package.cover_image_url:
        return package.cover_image_url
    if package.itinerary and package.itinerary[0].image_url:
        return package.itinerary[0].image_url
    return ""


def theme_css(styles: ThemeStyles) -> str:
    heading_font = _css_value(styles.heading_font)
    body_font = _css_value(styles.body_font)
    return (
        f".brochure {{ background: {_css_value(styles.background_color)}; "
        f"color: {_css_value(styles.primary_color)}; "
        f"font-family: '{body_font}', Georgia, serif; "
        f"font-weight: {_css_value(styles.body_weight)}; "
        f"font-style: {_css_value(styles.body_style)}; }}\n"
        f".brochure h1, .brochure h2, .brochure h3 {{ "
        f"font-family: '{heading_font}', Georgia, serif; "
        f"font-weight: {_css_value(styles.heading_weight)}; "
        f"font-style: {_css_value(styles.heading_style)}; }}\n"
        f".brochure .accent, .brochure .pricing h3 {{ color: {_css_value(styles.accent_color)}; }}\n"
    )


def _form(action: str, body: str, *, multipart: bool = False, method: str = "post", css: str = "") -> str:
    enctype = ' enctype="multipart/form-data"' if multipart else ""
    klass = f' class="{css}"' if css else ""
    return f'<form method="{method}" action="{_e(action)}"{enctype}{klass}>{body}</form>'


def _text_input(name: str, value: str, label: str | None = None) -> str:
    out = f'<label class="field">{_e(label)}</label>' if label else ""
    return out + f'<input type="text" name="{_e(name)}" value="{_e(value)}">'


def _select(name: str, options: List[str], current: str, label: str) -> str:
    if current not in options:
        options = [current] + options
    opts = "".join(
        f'<option value="{_e(o)}"{" selected" if o == current else ""}>{_e(o)}</option>'
        for o in options
    )
    return f'<label class="field">{_e(label)}</label><select name="{_e(name)}">{opts}</select>'


def _file_form(action: str, label: str) -> str:
    return _form(
        action,
        '<input type="file" name="file" accept="image/*" required> '
        f'<button class="btn-secondary" type="submit">{_e(label)}</button>',
        multipart=True,
    )


# ============================================================
# Renderer
# ============================================================

class BrochureRenderer:
    """
    Renderiza el estado de la app (y el brochure) a HTML.
    """

    # ---------- Documentos para export ----------

    def render_brochure_document(self, package: TravelPackage, orientation: str = "portrait") -> str:
        body = self._brochure(package, orientation=orientation)
        return self._document(package, body)

    def render_flyer_document(self, package: TravelPackage) -> str:
        body = f'<div class="brochure">{self._cover(package, "portrait")}</div>'
        return self._document(package, body)

    def _document(self, package: TravelPackage, body: str) -> str:
        return (
            "<!DOCTYPE html>\n<html lang=\"en\">\n<head>\n<meta charset=\"utf-8\">\n"
            f"<title>{_e(package.package_name)}</title>\n"
            f"<style>{_BROCHURE_CSS}\n{theme_css(package.styles)}</style>\n"
            f"</head>\n<body style=\"margin:0\">\n{body}\n</body>\n</html>"
        )

    # ---------- Página de la app ----------

    def render_page(self, state: AppState) -> str:
        lines: List[str] = []
        lines.append("<!DOCTYPE html>\n<html lang=\"en\">\n<head>\n<meta charset=\"utf-8\">\n")
        lines.append("<title>Itinerary Architect</title>\n")
        lines.append(f"<style>{_APP_CSS}\n{_BROCHURE_CSS}")
        if state.package_data is not None:
            lines.append(theme_css(state.package_data.styles))
        lines.append("</style>\n</head>\n<body>\n")

        lines.append(self._header(state))
        lines.append("<main>\n")

        if state.is_loading:
            lines.append('<div class="loading">Processing...</div>\n')
        if state.error:
            lines.append(self._error_banner(state.error))

        if state.step == "upload" or state.package_data is None:
            lines.append(self.render_upload_view())
        elif state.step == "edit":
            lines.append(self.render_edit_view(state))
        else:
            lines.append(self.render_preview_view(state))

        lines.append("</main>\n</body>\n</html>")
        return "".join(lines)

    def _header(self, state: AppState) -> str:
        actions = ""
        if state.step == "edit":
            actions = _form("/preview", '<button type="submit">Preview Itinerary</button>')
        elif state.step == "preview":
            actions = (
                _form("/back", '<button class="btn-secondary" type="submit">Back to Editor</button>')
                + '<a class="btn btn-secondary" href="/export/flyer.jpg">Export Flyer (JPEG)</a>'
                + _form(
                    "/export/pdf",
                    '<select name="orientation">'
                    '<option value="portrait">Portrait</option>'
                    '<option value="landscape">Landscape</option>'
                    "</select> "
                    '<button type="submit">Download PDF</button>',
                    method="get",
                )
            )
        return (
            '<header class="app"><h1>Itinerary Architect</h1>'
            f'<div class="actions">{actions}</div></header>\n'
        )

    def _error_banner(self, message: str) -> str:
        return (
            f'<div class="error"><span>{_e(message)}</span><span>'
            + _form("/credentials/select", '<button class="btn-secondary" type="submit">Update API Key</button>')
            + _form("/error/dismiss", '<button class="btn-secondary" type="submit">&times;</button>')
            + "</span></div>\n"
        )

    # ---------- Vista: upload ----------

    def render_upload_view(self) -> str:
        accept = ",".join(sorted(SUPPORTED_EXT))
        return (
            '<div class="upload card">'
            "<h2>Upload Doc File</h2>"
            "<p>Select your motorcycle tour document. We will automatically extract the "
            "day-wise pointers and structure.</p>"
            + _form(
                "/upload",
                f'<input type="file" name="file" accept="{accept}" required> '
                '<button type="submit">Choose File</button>',
                multipart=True,
            )
            + "</div>\n"
        )

    # ---------- Vista: edit ----------

    def render_edit_view(self, state: AppState) -> str:
        pkg = state.package_data
        assert pkg is not None

        aside: List[str] = []

        # BRANDING
        logo = f'<img class="thumb" src="{_e(pkg.logo_url)}" alt="Logo">' if pkg.logo_url else ""
        aside.append('<section class="card"><h3>Branding</h3>')
        aside.append(logo + _file_form("/images/logo", "Upload Logo"))
        aside.append(
            _form(
                "/package/fields",
                _text_input("packageName", pkg.package_name, "Package Name")
                + _text_input("destination", pkg.destination, "Destination")
                + _text_input("duration", pkg.duration, "Duration")
                + _text_input("companyName", pkg.company_name, "Agency Name")
                + '<label class="field">Contact Details</label>'
                f'<textarea name="contactDetails">{_e(pkg.contact_details)}</textarea>'
                + '<label class="field">Terms</label>'
                f'<textarea name="terms">{_e(pkg.terms)}</textarea>'
                + '<p><button type="submit">Save</button></p>',
            )
        )
        cover = f'<img class="thumb" src="{_e(pkg.cover_image_url)}" alt="Cover">' if pkg.cover_image_url else ""
        aside.append('<label class="field">Cover Image</label>' + cover + _file_form("/images/cover", "Upload Cover"))
        aside.append("</section>")

        # STYLE
        aside.append('<section class="card"><h3>Style</h3>')
        theme_buttons = "".join(
            f'<button type="submit" name="theme" value="{_e(key)}" '
            f'class="{"theme-active" if pkg.theme == key else "btn-secondary"}">{_e(label)}</button> '
            for key, label in THEME_LABELS.items()
        )
        aside.append(_form("/package/theme", theme_buttons))
        s = pkg.styles
        aside.append(
            _form(
                "/package/styles",
                '<label class="field">Primary Color</label>'
                f'<input type="color" name="primaryColor" value="{_e(s.primary_color)}">'
                '<label class="field">Accent Color</label>'
                f'<input type="color" name="accentColor" value="{_e(s.accent_color)}">'
                '<label class="field">Background Color</label>'
                f'<input type="color" name="backgroundColor" value="{_e(s.background_color)}">'
                + _select("headingFont", FONT_OPTIONS, s.heading_font, "Heading Font")
                + _select("headingWeight", WEIGHT_OPTIONS, s.heading_weight, "Heading Weight")
                + _select("headingStyle", ["normal", "italic"], s.heading_style, "Heading Style")
                + _select("bodyFont", FONT_OPTIONS, s.body_font, "Body Font")
                + _select("bodyWeight", WEIGHT_OPTIONS, s.body_weight, "Body Weight")
                + _select("bodyStyle", ["normal", "italic"], s.body_style, "Body Style")
                + '<p><button type="submit">Apply Styles</button></p>',
            )
        )
        aside.append("</section>")

        # PRICING
        aside.append(f'<section class="card"><h3>Pricing ({_e(pkg.currency)})</h3>')
        aside.append(_form("/package/fields", _text_input("currency", pkg.currency, "Currency")
                           + ' <button class="btn-secondary" type="submit">Save</button>'))
        for i, row in enumerate(pkg.pricing):
            aside.append(
                '<div class="inline">'
                + _form(
                    f"/pricing/{i}",
                    f'<input type="text" name="label" value="{_e(row.label)}">'
                    f'<input type="text" name="value" value="{_e(row.value)}" placeholder="Price amount">'
                    '<button class="btn-secondary" type="submit">Save</button>',
                )
                + _form(f"/pricing/{i}/remove", '<button class="btn-secondary" type="submit">&times;</button>')
                + "</div>"
            )
        aside.append(_form("/pricing", '<button class="btn-secondary" type="submit">+ Add Price</button>'))
        aside.append("</section>")

        # INCLUSIONS / EXCLUSIONS
        for name, title, items in (
            ("inclusions", "Inclusions", pkg.inclusions),
            ("exclusions", "Exclusions", pkg.exclusions),
        ):
            aside.append(f'<section class="card"><h3>{title}</h3>')
            for i, item in enumerate(items):
                aside.append(
                    '<div class="inline">'
                    + _form(
                        f"/lists/{name}/{i}",
                        f'<input type="text" name="value" value="{_e(item)}">'
                        '<button class="btn-secondary" type="submit">Save</button>',
                    )
                    + _form(f"/lists/{name}/{i}/remove", '<button class="btn-secondary" type="submit">&times;</button>')
                    + "</div>"
                )
            aside.append(_form(f"/lists/{name}", '<button class="btn-secondary" type="submit">+ Add Item</button>'))
            aside.append("</section>")

        # ITINERARY
        days: List[str] = ["<h3>Itinerary Details</h3>"]
        for idx, day in enumerate(pkg.itinerary):
            days.append(self._edit_day(idx, day))

        return (
            '<div class="grid">'
            f'<aside>{"".join(aside)}</aside>'
            f'<section>{"".join(days)}</section>'
            "</div>\n"
        )

    def _edit_day(self, idx: int, day: ItineraryDay) -> str:
        parts: List[str] = [f'<div class="card" id="edit-day-{idx}">']
        parts.append(
            _form(
                f"/days/{idx}/fields",
                '<label class="field">Day</label>'
                f'<input type="number" name="day" value="{day.day}" min="0">'
                + _text_input("title", day.title, "Title")
                + _text_input("location", day.location, "Location")
                + '<label class="field">Description</label>'
                f'<textarea name="description">{_e(day.description)}</textarea>'
                + '<p><button type="submit">Save Day</button></p>',
            )
        )

        parts.append('<label class="field">Day Pointers (Activities)</label>')
        for a_idx, act in enumerate(day.activities):
            parts.append(
                '<div class="inline">'
                + _form(
                    f"/days/{idx}/activities/{a_idx}",
                    f'<input type="text" name="value" value="{_e(act)}">'
                    '<button class="btn-secondary" type="submit">Save</button>',
                )
                + _form(
                    f"/days/{idx}/activities/{a_idx}/remove",
                    '<button class="btn-secondary" type="submit">&times;</button>',
                )
                + "</div>"
            )
        parts.append(_form(f"/days/{idx}/activities", '<button class="btn-secondary" type="submit">+ Add Pointer</button>'))

        parts.append('<label class="field">Day Visual</label>')
        if day.image_url:
            parts.append(f'<img class="thumb" src="{_e(day.image_url)}" alt="Day preview">')
        parts.append(_file_form(f"/images/{idx}", "Change Image" if day.image_url else "Upload"))
        parts.append("</div>")
        return "".join(parts)

    # ---------- Vista: preview ----------

    def render_preview_view(self, state: AppState) -> str:
        pkg = state.package_data
        assert pkg is not None

        out: List[str] = []
        pending = state.pending_image
        if pending is not None:
            target = "cover" if pending.slot == "cover" else "logo" if pending.slot == "logo" else (
                day_label(pkg.itinerary[pending.slot]) if isinstance(pending.slot, int)
                and 0 <= pending.slot < len(pkg.itinerary) else str(pending.slot)
            )
            out.append(
                '<div class="staged">'
                f'<img class="thumb" src="{_e(pending.data_url)}" alt="Staged image">'
                f"<span>Replace the {_e(target)} image?</span>"
                + _form("/images/staged/confirm", '<button type="submit">Confirm</button>')
                + _form("/images/staged/cancel", '<button class="btn-secondary" type="submit">Cancel</button>')
                + "</div>\n"
            )

        out.append('<div class="preview-wrap">')
        out.append(self._brochure(pkg, state=state, orientation="portrait"))
        out.append("</div>\n")
        return "".join(out)

    # ---------- Brochure ----------

    def _brochure(
        self,
        package: TravelPackage,
        *,
        state: AppState | None = None,
        orientation: str = "portrait",
    ) -> str:
        interactive = state is not None
        parts: List[str] = [f'<div class="brochure {_e(package.theme)}">']
        parts.append(self._cover(package, orientation, interactive=interactive))
        parts.append(
            f'<div class="intro"><h2>{_e(INTRO_TITLE)}</h2><p>{_e(INTRO_TEXT)}</p></div>'
        )
        for idx, day in enumerate(package.itinerary):
            parts.append(self._day(idx, day, state))
        parts.append(self._pricing(package))
        parts.append(self._logistics(package))
        parts.append(self._footer(package))
        parts.append("</div>")
        return "".join(parts)

    def _cover(self, package: TravelPackage, orientation: str, *, interactive: bool = False) -> str:
        image = cover_image(package)
        shade = "rgba(0,0,0,0.3)" if package.theme == "luxe" else "rgba(0,0,0,0.5)"
        height = COVER_HEIGHT.get(orientation, COVER_HEIGHT["portrait"])

        parts: List[str] = [f'<div class="cover" id="flyer" style="height: {height}">']
        if image:
            parts.append(f'<img class="cover-bg" src="{_e(image)}" alt="Cover">')
        parts.append(f'<div class="shade" style="background: {shade}"></div>')
        parts.append('<div class="cover-body"><div class="brand">')
        if package.logo_url:
            parts.append(f'<img src="{_e(package.logo_url)}" alt="Logo">')
        else:
            parts.append("<span></span>")
        parts.append(f'<span class="company">{_e(package.company_name)}</span></div>')
        if interactive:
            parts.append('<div class="overlay">' + _file_form("/images/cover", "Upload Custom Cover") + "</div>")
        parts.append(
            '<div class="titles">'
            f"<h1>{_e(package.package_name)}</h1>"
            '<div class="rule"></div>'
            '<div class="facts">'
            f'<div><p class="k">Destination</p><p class="v">{_e(package.destination)}</p></div>'
            f'<div><p class="k">Duration</p><p class="v">{_e(package.duration)}</p></div>'
            "</div></div>"
        )
        parts.append("</div></div>")
        return "".join(parts)

    def _day(self, idx: int, day: ItineraryDay, state: AppState | None) -> str:
        parts: List[str] = [f'<div class="day" id="day-{idx}">']
        parts.append(f'<span class="label">{_e(day_label(day))}</span>')
        parts.append(f"<h3>{_e(day.title)}</h3>")

        parts.append('<div class="hero">')
        if day.image_url:
            parts.append(f'<img src="{_e(day.image_url)}" alt="{_e(day.title)}">')
        else:
            parts.append('<div class="empty">No Image Selected</div>')
        parts.append("</div>")

        if state is not None:
            parts.append(self._image_controls(idx, state))

        parts.append(f'<div class="location accent">&mdash; {_e(day.location)}</div>')
        if day.activities:
            items = "".join(f"<li>{_e(a)}</li>" for a in day.activities)
            parts.append(f'<ul class="activities">{items}</ul>')
        if day.description:
            parts.append(f'<p class="description">{_e(day.description)}</p>')
        parts.append("</div>")
        return "".join(parts)

    def _image_controls(self, idx: int, state: AppState) -> str:
        if state.regen_index == idx:
            return (
                '<div class="overlay">'
                + _form(
                    f"/days/{idx}/regenerate",
                    "<strong>AI Regeneration Prompt</strong>"
                    '<textarea name="prompt" placeholder="Describe the new image based on these pointers...">'
                    f"{_e(state.regen_prompt)}</textarea>"
                    '<button type="submit">Generate</button>',
                )
                + _form(f"/days/{idx}/regenerate/close", '<button class="btn-secondary" type="submit">Cancel</button>')
                + "</div>"
            )
        return (
            '<div class="overlay">'
            + _form(f"/days/{idx}/regenerate/open", '<button type="submit">Regenerate (AI)</button>')
            + _file_form(f"/images/{idx}", "Upload File")
            + "</div>"
        )

    def _pricing(self, package: TravelPackage) -> str:
        rows = "".join(
            '<div class="row">'
            f'<span class="k">{_e(row.label)}</span>'
            f'<span class="v">{_e(package.currency)} {_e(row.value or "-")}</span>'
            "</div>"
            for row in package.pricing
        )
        if not rows:
            rows = '<div class="row"><span class="k">Price on request</span><span class="v">-</span></div>'
        return f'<div class="pricing"><h3>Package Investment</h3>{rows}</div>'

    def _logistics(self, package: TravelPackage) -> str:
        inc = "".join(f'<li><span class="mark">/</span>{_e(i)}</li>' for i in package.inclusions)
        exc = "".join(f'<li><span class="mark">&times;</span>{_e(i)}</li>' for i in package.exclusions)
        return (
            '<div class="logistics">'
            f'<div class="inclusions"><h4>Inclusions</h4><ul>{inc}</ul></div>'
            f'<div class="exclusions"><h4>Exclusions</h4><ul>{exc}</ul></div>'
            "</div>"
        )

    def _footer(self, package: TravelPackage) -> str:
        parts: List[str] = ['<div class="footer">']
        parts.append(f'<p class="company">{_e(package.company_name or DEFAULT_COMPANY)}</p>')
        if package.contact_details:
            parts.append(f'<p class="contact">{_e(package.contact_details)}</p>')
        if package.terms:
            parts.append(f'<p class="terms">{_e(package.terms)}</p>')
        parts.append(
            '<p class="legal">Bespoke Journeys &bull; Registered Travel Provider '
            f"&bull; &copy; {date.today().year}</p>"
        )
        parts.append("</div>")
        return "".join(parts)
