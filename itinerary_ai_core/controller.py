from __future__ import annotations

"""
itinerary_ai_core.controller
============================

Dueño único de `AppState`.

Cada operación pública:
  1) arma una o más acciones (`state.py`),
  2) las aplica con `reduce` como reemplazo completo del estado (bajo lock),
  3) notifica a los suscriptores con el snapshot nuevo.

Las operaciones con IA / export (`begin_upload`, `regenerate_image`,
`export_pdf`, `export_flyer_jpeg`) corren la llamada externa FUERA del lock,
marcan `is_loading` mientras dura, y atrapan TODA falla en el lugar: el error
clasificado se escribe en `AppState.error` y nunca sale de acá.

Los adaptadores se inyectan (con defaults reales) para poder testear el
controller sin OpenAI, sin WeasyPrint y sin UI.
"""

import logging
import threading
from typing import Callable, List, Mapping, Optional

from .credentials import CredentialProvider, EnvCredentialProvider
from .doc_engine import build_travel_package
from .domain_models import FONT_STYLES, ExportArtifact, ThemeType
from .errors import AuthFailure, ExportFailure, ItineraryError, UnknownAdapterFailure
from .export import JpegFlyerExporter, PdfWeasyprintExporter
from .ingest import extract_text
from .llm_client import generate_day_image, parse_itinerary_from_text
from .media import ImageSlot, image_bytes_to_data_url
from .renderer import BrochureRenderer, export_basename
from .state import (
    AddActivity,
    AddListItem,
    AddPricingRow,
    AppState,
    ApplyImage,
    BackToEditor,
    CancelStagedImage,
    CloseRegenPrompt,
    ConfirmStagedImage,
    DayField,
    DismissError,
    ErrorRaised,
    GoToPreview,
    ImageRegenerated,
    ListField,
    LoadingFinished,
    LoadingStarted,
    OpenRegenPrompt,
    PackageField,
    PricingField,
    RemoveActivity,
    RemoveListItem,
    RemovePricingRow,
    SetActivity,
    SetDayField,
    SetField,
    SetListItem,
    SetPricingRow,
    SetRegenPrompt,
    SetStyleField,
    SetTheme,
    StageImage,
    StyleField,
    UploadSucceeded,
    reduce,
)

logger = logging.getLogger(__name__)

Listener = Callable[[AppState], None]
Structurer = Callable[[str], dict]
ImageGenerator = Callable[..., str]
TextExtractor = Callable[[str, bytes], str]

# El detalle de las fallas inesperadas va al log, no al usuario
UPLOAD_FAILURE_MESSAGE = "An unexpected error occurred while analyzing the document."
IMAGE_FAILURE_MESSAGE = "Failed to generate image."


class AppController:
    """
    Controlador de la sesión (una sola, en memoria).

    Attributes
    ----------
    state:
        Snapshot actual (inmutable). Cada cambio lo reemplaza entero.
    """

    def __init__(
        self,
        *,
        extractor: TextExtractor = extract_text,
        structurer: Structurer = parse_itinerary_from_text,
        image_generator: ImageGenerator = generate_day_image,
        credentials: CredentialProvider | None = None,
        renderer: BrochureRenderer | None = None,
        pdf_exporter: PdfWeasyprintExporter | None = None,
        jpeg_exporter: JpegFlyerExporter | None = None,
        initial_state: AppState | None = None,
    ) -> None:
        self._extractor = extractor
        self._structurer = structurer
        self._image_generator = image_generator
        self._credentials: CredentialProvider = credentials or EnvCredentialProvider()
        self._renderer = renderer or BrochureRenderer()
        self._pdf_exporter = pdf_exporter or PdfWeasyprintExporter()
        self._jpeg_exporter = jpeg_exporter or JpegFlyerExporter()

        self._state = initial_state or AppState()
        self._lock = threading.Lock()
        self._listeners: List[Listener] = []

    # ------------------------------------------------------------
    # Estado y suscripción
    # ------------------------------------------------------------

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def renderer(self) -> BrochureRenderer:
        return self._renderer

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Registra un listener; devuelve la función para desuscribirlo."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, action: object) -> AppState:
        """Aplica una acción como reemplazo completo del estado y notifica."""
        with self._lock:
            previous = self._state
            new_state = reduce(previous, action)
            self._state = new_state

        if new_state is not previous:
            for listener in list(self._listeners):
                listener(new_state)
        return new_state

    def _fail(self, err: ItineraryError) -> None:
        self.dispatch(ErrorRaised(str(err)))
        if isinstance(err, AuthFailure):
            self._credentials.open_select_key()

    def report_error(self, err: ItineraryError) -> AppState:
        """Publica un error detectado fuera del controller (p.ej. en la capa HTTP)."""
        self._fail(err)
        return self._state

    # ------------------------------------------------------------
    # Upload
    # ------------------------------------------------------------

    def begin_upload(self, filename: str, data: bytes) -> AppState:
        """
        Extrae el texto del archivo, lo estructura con IA y pasa a `edit`.

        Solo se acepta en el paso `upload`. Si algo falla, `error` queda con
        el mensaje clasificado y el paso sigue en `upload`.
        """
        if self._state.step != "upload":
            logger.warning("Upload ignorado: el paso actual es %r", self._state.step)
            return self._state

        self.dispatch(LoadingStarted())
        try:
            text = self._extractor(filename, data)
            partial = self._structurer(text)
            package = build_travel_package(partial)
        except ItineraryError as e:
            logger.warning("⚠️ Upload de %s falló: %s", filename, e)
            self._fail(e)
            return self._state
        except Exception:
            logger.exception("Falla inesperada procesando %s", filename)
            self._fail(UnknownAdapterFailure(UPLOAD_FAILURE_MESSAGE))
            return self._state

        logger.info(
            "✅ Paquete %r estructurado (%d días)", package.package_name, len(package.itinerary)
        )
        return self.dispatch(UploadSucceeded(package))

    # ------------------------------------------------------------
    # Edición del documento
    # ------------------------------------------------------------

    def set_field(self, field: PackageField | str, value: str) -> AppState:
        return self.dispatch(SetField(PackageField(field), value))

    def set_day_field(self, day_index: int, field: DayField | str, value: str) -> AppState:
        return self.dispatch(SetDayField(day_index, DayField(field), value))

    def set_activity(self, day_index: int, activity_index: int, value: str) -> AppState:
        return self.dispatch(SetActivity(day_index, activity_index, value))

    def add_activity(self, day_index: int) -> AppState:
        return self.dispatch(AddActivity(day_index))

    def remove_activity(self, day_index: int, activity_index: int) -> AppState:
        return self.dispatch(RemoveActivity(day_index, activity_index))

    def set_pricing_row(self, index: int, field: PricingField | str, value: str) -> AppState:
        return self.dispatch(SetPricingRow(index, PricingField(field), value))

    def add_pricing_row(self) -> AppState:
        return self.dispatch(AddPricingRow())

    def remove_pricing_row(self, index: int) -> AppState:
        return self.dispatch(RemovePricingRow(index))

    def set_list_item(self, field: ListField | str, index: int, value: str) -> AppState:
        return self.dispatch(SetListItem(ListField(field), index, value))

    def add_list_item(self, field: ListField | str) -> AppState:
        return self.dispatch(AddListItem(ListField(field)))

    def remove_list_item(self, field: ListField | str, index: int) -> AppState:
        return self.dispatch(RemoveListItem(ListField(field), index))

    def set_theme(self, theme: ThemeType) -> AppState:
        return self.dispatch(SetTheme(theme))

    def set_style_field(self, field: StyleField | str, value: str) -> AppState:
        return self.dispatch(SetStyleField(StyleField(field), value))

    def set_style_fields(self, updates: Mapping[str, str]) -> AppState:
        """
        Aplica varios overrides de estilo de una vez: o todos o ninguno.

        Raises:
            ValueError: clave desconocida o estilo tipográfico inválido
                (en ese caso no se aplica nada).
        """
        actions = [SetStyleField(StyleField(key), value) for key, value in updates.items()]
        for action in actions:
            if action.field in (StyleField.HEADING_STYLE, StyleField.BODY_STYLE) and action.value not in FONT_STYLES:
                raise ValueError(f"{action.field.value} debe ser 'normal' o 'italic', no {action.value!r}")

        state = self._state
        for action in actions:
            state = self.dispatch(action)
        return state

    # ------------------------------------------------------------
    # Navegación y errores
    # ------------------------------------------------------------

    def go_to_preview(self) -> AppState:
        return self.dispatch(GoToPreview())

    def back_to_editor(self) -> AppState:
        return self.dispatch(BackToEditor())

    def dismiss_error(self) -> AppState:
        return self.dispatch(DismissError())

    def select_credentials(self) -> AppState:
        """Acción "Update API Key" del banner de error."""
        self._credentials.open_select_key()
        return self.dispatch(DismissError())

    # ------------------------------------------------------------
    # Imágenes subidas por el usuario
    # ------------------------------------------------------------

    def request_image_replace(
        self,
        slot: ImageSlot,
        filename: str,
        data: bytes,
        content_type: str | None = None,
    ) -> AppState:
        """
        Lee la imagen como data URL y la aplica según el paso:

        - `preview`: queda en `pending_image` hasta confirmar/cancelar.
        - `edit`: se aplica al documento de inmediato.
        """
        state = self._state
        if state.package_data is None or state.step == "upload":
            return state

        try:
            data_url = image_bytes_to_data_url(slot, filename, data, content_type)
        except ItineraryError as e:
            logger.warning("Imagen rechazada para %r: %s", slot, e)
            self._fail(e)
            return self._state

        if self._state.step == "preview":
            return self.dispatch(StageImage(slot, data_url))
        return self.dispatch(ApplyImage(slot, data_url))

    def confirm_staged_image(self) -> AppState:
        return self.dispatch(ConfirmStagedImage())

    def cancel_staged_image(self) -> AppState:
        return self.dispatch(CancelStagedImage())

    # ------------------------------------------------------------
    # Regeneración con IA
    # ------------------------------------------------------------

    def open_regen_prompt(self, day_index: int) -> AppState:
        return self.dispatch(OpenRegenPrompt(day_index))

    def set_regen_prompt(self, text: str) -> AppState:
        return self.dispatch(SetRegenPrompt(text))

    def close_regen_prompt(self) -> AppState:
        return self.dispatch(CloseRegenPrompt())

    def regenerate_image(self, day_index: int, custom_prompt: Optional[str] = None) -> AppState:
        """
        Genera una imagen nueva para el día y la escribe directo en `image_url`
        (sin pasar por la confirmación de staging).
        """
        state = self._state
        pkg = state.package_data
        if pkg is None or not (0 <= day_index < len(pkg.itinerary)):
            return state

        day = pkg.itinerary[day_index]
        prompt = custom_prompt if custom_prompt is not None else state.regen_prompt

        self.dispatch(LoadingStarted())
        if not self._credentials.has_selected_key():
            self._credentials.open_select_key()

        try:
            image_url = self._image_generator(
                day.location,
                day.title,
                day.description or ". ".join(day.activities),
                prompt or None,
            )
            self.dispatch(ImageRegenerated(day_index, image_url))
            logger.info("🖼️ Imagen regenerada para el día %s", day.day)
        except ItineraryError as e:
            logger.warning("⚠️ Regeneración falló para el día %s: %s", day.day, e)
            self._fail(e)
        except Exception:
            logger.exception("Falla inesperada regenerando la imagen del día %s", day.day)
            self._fail(UnknownAdapterFailure(IMAGE_FAILURE_MESSAGE))
        finally:
            self.dispatch(LoadingFinished())

        return self._state

    # ------------------------------------------------------------
    # Export
    # ------------------------------------------------------------

    def _run_export(self, build: Callable[[], ExportArtifact]) -> Optional[ExportArtifact]:
        if self._state.package_data is None:
            return None

        self.dispatch(LoadingStarted())
        try:
            return build()
        except Exception:
            # El detalle queda en el log; al usuario le llega el mensaje genérico
            logger.exception("Falló el export")
            self.dispatch(ErrorRaised(ExportFailure.default_message))
            return None
        finally:
            self.dispatch(LoadingFinished())

    def export_pdf(self, orientation: str = "portrait") -> Optional[ExportArtifact]:
        """Brochure completo → PDF A4 (portrait|landscape, márgenes 0)."""

        def build() -> ExportArtifact:
            pkg = self._state.package_data
            html = self._renderer.render_brochure_document(pkg, orientation=orientation)
            content = self._pdf_exporter.export_brochure(html, orientation=orientation)
            return ExportArtifact(
                filename=f"{export_basename(pkg)}.pdf",
                media_type="application/pdf",
                content=content,
            )

        return self._run_export(build)

    def export_flyer_jpeg(self) -> Optional[ExportArtifact]:
        """Solo la portada → JPEG de alta resolución."""

        def build() -> ExportArtifact:
            pkg = self._state.package_data
            html = self._renderer.render_flyer_document(pkg)
            content = self._jpeg_exporter.export_flyer(html)
            return ExportArtifact(
                filename=f"{export_basename(pkg)}_Flyer.jpg",
                media_type="image/jpeg",
                content=content,
            )

        return self._run_export(build)
