"""
Estado de la aplicación y reducer puro.

Todo cambio de `AppState` se expresa como `reduce(state, action) -> AppState`:

- El estado y el documento son dataclasses congeladas; las colecciones son
  tuplas. Cada mutación reemplaza SOLO el camino raíz → hoja modificado, el
  resto de los objetos se comparte (misma identidad).
- Los índices fuera de rango, o la ausencia de `package_data`, son no-ops: el
  reducer devuelve el MISMO objeto de estado.
- Los campos editables son enums explícitos (`PackageField`, `DayField`, ...);
  no hay acceso dinámico por string al documento.

El dueño del estado (y de los efectos: IA, export) es `controller.AppController`.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Dict, Literal, Optional, Tuple, Type, TypeVar

from .domain_models import FONT_STYLES, ItineraryDay, PricingRow, ThemeType, TravelPackage
from .media import COVER, LOGO, ImageSlot
from .themes import get_theme_styles

logger = logging.getLogger(__name__)

Step = Literal["upload", "edit", "preview"]

DEFAULT_ACTIVITY = "New Activity Pointer"
DEFAULT_PRICE_LABEL = "New Price"
DEFAULT_LIST_ITEM = "New item"


# ============================================================
# Estado
# ============================================================

@dataclass(frozen=True)
class PendingImage:
    """Imagen subida en modo preview, a la espera de confirmar/cancelar."""
    slot: ImageSlot
    data_url: str


@dataclass(frozen=True)
class AppState:
    step: Step = "upload"
    package_data: Optional[TravelPackage] = None
    is_loading: bool = False
    error: Optional[str] = None

    # Estado de UI
    pending_image: Optional[PendingImage] = None
    regen_index: Optional[int] = None
    regen_prompt: str = ""


# ============================================================
# Claves editables
# ============================================================

class _FieldKey(str, Enum):
    """Clave camelCase (la del esquema) → atributo snake_case del dataclass."""

    @property
    def attr(self) -> str:
        return re.sub(r"(?<!^)(?=[A-Z])", "_", self.value).lower()


class PackageField(_FieldKey):
    PACKAGE_NAME = "packageName"
    DESTINATION = "destination"
    DURATION = "duration"
    CURRENCY = "currency"
    COMPANY_NAME = "companyName"
    LOGO_URL = "logoUrl"
    COVER_IMAGE_URL = "coverImageUrl"
    CONTACT_DETAILS = "contactDetails"
    TERMS = "terms"


class DayField(_FieldKey):
    DAY = "day"
    TITLE = "title"
    LOCATION = "location"
    DESCRIPTION = "description"
    IMAGE_URL = "imageUrl"


class PricingField(_FieldKey):
    LABEL = "label"
    VALUE = "value"


class ListField(_FieldKey):
    INCLUSIONS = "inclusions"
    EXCLUSIONS = "exclusions"


class StyleField(_FieldKey):
    PRIMARY_COLOR = "primaryColor"
    ACCENT_COLOR = "accentColor"
    BACKGROUND_COLOR = "backgroundColor"
    HEADING_FONT = "headingFont"
    HEADING_WEIGHT = "headingWeight"
    HEADING_STYLE = "headingStyle"
    BODY_FONT = "bodyFont"
    BODY_WEIGHT = "bodyWeight"
    BODY_STYLE = "bodyStyle"


# ============================================================
# Acciones
# ============================================================

@dataclass(frozen=True)
class LoadingStarted:
    pass


@dataclass(frozen=True)
class LoadingFinished:
    pass


@dataclass(frozen=True)
class UploadSucceeded:
    package: TravelPackage


@dataclass(frozen=True)
class ErrorRaised:
    message: str


@dataclass(frozen=True)
class DismissError:
    pass


@dataclass(frozen=True)
class SetField:
    field: PackageField
    value: str


@dataclass(frozen=True)
class SetDayField:
    day_index: int
    field: DayField
    value: str


@dataclass(frozen=True)
class SetActivity:
    day_index: int
    activity_index: int
    value: str


@dataclass(frozen=True)
class AddActivity:
    day_index: int
    value: str = DEFAULT_ACTIVITY


@dataclass(frozen=True)
class RemoveActivity:
    day_index: int
    activity_index: int


@dataclass(frozen=True)
class SetPricingRow:
    index: int
    field: PricingField
    value: str


@dataclass(frozen=True)
class AddPricingRow:
    label: str = DEFAULT_PRICE_LABEL
    value: str = ""


@dataclass(frozen=True)
class RemovePricingRow:
    index: int


@dataclass(frozen=True)
class SetListItem:
    field: ListField
    index: int
    value: str


@dataclass(frozen=True)
class AddListItem:
    field: ListField
    value: str = DEFAULT_LIST_ITEM


@dataclass(frozen=True)
class RemoveListItem:
    field: ListField
    index: int


@dataclass(frozen=True)
class SetTheme:
    theme: ThemeType


@dataclass(frozen=True)
class SetStyleField:
    field: StyleField
    value: str


@dataclass(frozen=True)
class GoToPreview:
    pass


@dataclass(frozen=True)
class BackToEditor:
    pass


@dataclass(frozen=True)
class StageImage:
    slot: ImageSlot
    data_url: str


@dataclass(frozen=True)
class ApplyImage:
    slot: ImageSlot
    data_url: str


@dataclass(frozen=True)
class ConfirmStagedImage:
    pass


@dataclass(frozen=True)
class CancelStagedImage:
    pass


@dataclass(frozen=True)
class OpenRegenPrompt:
    day_index: int


@dataclass(frozen=True)
class SetRegenPrompt:
    text: str


@dataclass(frozen=True)
class CloseRegenPrompt:
    pass


@dataclass(frozen=True)
class ImageRegenerated:
    day_index: int
    image_url: str


# ============================================================
# Helpers de actualización estructural
# ============================================================

T = TypeVar("T")


def _in_range(seq: Tuple[object, ...], index: int) -> bool:
    return 0 <= index < len(seq)


def _replace_at(seq: Tuple[T, ...], index: int, item: T) -> Tuple[T, ...]:
    return seq[:index] + (item,) + seq[index + 1:]


def _remove_at(seq: Tuple[T, ...], index: int) -> Tuple[T, ...]:
    return seq[:index] + seq[index + 1:]


def _with_package(state: AppState, fn: Callable[[TravelPackage], TravelPackage]) -> AppState:
    pkg = state.package_data
    if pkg is None:
        return state
    new_pkg = fn(pkg)
    if new_pkg is pkg:
        return state
    return replace(state, package_data=new_pkg)


def _with_day(
    state: AppState,
    day_index: int,
    fn: Callable[[ItineraryDay], ItineraryDay],
) -> AppState:
    def update(pkg: TravelPackage) -> TravelPackage:
        if not _in_range(pkg.itinerary, day_index):
            return pkg
        day = pkg.itinerary[day_index]
        new_day = fn(day)
        if new_day is day:
            return pkg
        return replace(pkg, itinerary=_replace_at(pkg.itinerary, day_index, new_day))

    return _with_package(state, update)


def _apply_image(pkg: TravelPackage, slot: ImageSlot, data_url: str) -> TravelPackage:
    if slot == COVER:
        return replace(pkg, cover_image_url=data_url)
    if slot == LOGO:
        return replace(pkg, logo_url=data_url)
    if isinstance(slot, int) and _in_range(pkg.itinerary, slot):
        day = pkg.itinerary[slot]
        return replace(pkg, itinerary=_replace_at(pkg.itinerary, slot, replace(day, image_url=data_url)))
    return pkg


def _is_valid_slot(pkg: TravelPackage, slot: ImageSlot) -> bool:
    if slot in (COVER, LOGO):
        return True
    return isinstance(slot, int) and _in_range(pkg.itinerary, slot)


# ============================================================
# Handlers
# ============================================================

def _loading_started(state: AppState, action: LoadingStarted) -> AppState:
    return replace(state, is_loading=True, error=None)


def _loading_finished(state: AppState, action: LoadingFinished) -> AppState:
    if not state.is_loading:
        return state
    return replace(state, is_loading=False)


def _upload_succeeded(state: AppState, action: UploadSucceeded) -> AppState:
    # Paquete nuevo: se descarta todo el estado de UI anterior
    return AppState(step="edit", package_data=action.package)


def _error_raised(state: AppState, action: ErrorRaised) -> AppState:
    return replace(state, is_loading=False, error=action.message)


def _dismiss_error(state: AppState, action: DismissError) -> AppState:
    if state.error is None:
        return state
    return replace(state, error=None)


def _set_field(state: AppState, action: SetField) -> AppState:
    field = PackageField(action.field)
    return _with_package(state, lambda pkg: replace(pkg, **{field.attr: action.value}))


def _set_day_field(state: AppState, action: SetDayField) -> AppState:
    field = DayField(action.field)
    value: object = action.value
    if field is DayField.DAY:
        try:
            value = int(float(action.value))
        except (TypeError, ValueError, OverflowError):
            logger.warning("Número de día inválido: %r", action.value)
            return state
    return _with_day(state, action.day_index, lambda day: replace(day, **{field.attr: value}))


def _set_activity(state: AppState, action: SetActivity) -> AppState:
    def update(day: ItineraryDay) -> ItineraryDay:
        if not _in_range(day.activities, action.activity_index):
            return day
        return replace(day, activities=_replace_at(day.activities, action.activity_index, action.value))

    return _with_day(state, action.day_index, update)


def _add_activity(state: AppState, action: AddActivity) -> AppState:
    return _with_day(
        state,
        action.day_index,
        lambda day: replace(day, activities=day.activities + (action.value,)),
    )


def _remove_activity(state: AppState, action: RemoveActivity) -> AppState:
    def update(day: ItineraryDay) -> ItineraryDay:
        if not _in_range(day.activities, action.activity_index):
            return day
        return replace(day, activities=_remove_at(day.activities, action.activity_index))

    return _with_day(state, action.day_index, update)


def _set_pricing_row(state: AppState, action: SetPricingRow) -> AppState:
    field = PricingField(action.field)

    def update(pkg: TravelPackage) -> TravelPackage:
        if not _in_range(pkg.pricing, action.index):
            return pkg
        row = replace(pkg.pricing[action.index], **{field.attr: action.value})
        return replace(pkg, pricing=_replace_at(pkg.pricing, action.index, row))

    return _with_package(state, update)


def _add_pricing_row(state: AppState, action: AddPricingRow) -> AppState:
    row = PricingRow(label=action.label, value=action.value)
    return _with_package(state, lambda pkg: replace(pkg, pricing=pkg.pricing + (row,)))


def _remove_pricing_row(state: AppState, action: RemovePricingRow) -> AppState:
    def update(pkg: TravelPackage) -> TravelPackage:
        if not _in_range(pkg.pricing, action.index):
            return pkg
        return replace(pkg, pricing=_remove_at(pkg.pricing, action.index))

    return _with_package(state, update)


def _set_list_item(state: AppState, action: SetListItem) -> AppState:
    attr = ListField(action.field).attr

    def update(pkg: TravelPackage) -> TravelPackage:
        items = getattr(pkg, attr)
        if not _in_range(items, action.index):
            return pkg
        return replace(pkg, **{attr: _replace_at(items, action.index, action.value)})

    return _with_package(state, update)


def _add_list_item(state: AppState, action: AddListItem) -> AppState:
    attr = ListField(action.field).attr
    return _with_package(state, lambda pkg: replace(pkg, **{attr: getattr(pkg, attr) + (action.value,)}))


def _remove_list_item(state: AppState, action: RemoveListItem) -> AppState:
    attr = ListField(action.field).attr

    def update(pkg: TravelPackage) -> TravelPackage:
        items = getattr(pkg, attr)
        if not _in_range(items, action.index):
            return pkg
        return replace(pkg, **{attr: _remove_at(items, action.index)})

    return _with_package(state, update)


def _set_theme(state: AppState, action: SetTheme) -> AppState:
    styles = get_theme_styles(action.theme)
    return _with_package(state, lambda pkg: replace(pkg, theme=action.theme, styles=styles))


def _set_style_field(state: AppState, action: SetStyleField) -> AppState:
    field = StyleField(action.field)
    if field in (StyleField.HEADING_STYLE, StyleField.BODY_STYLE) and action.value not in FONT_STYLES:
        raise ValueError(f"{field.value} debe ser 'normal' o 'italic', no {action.value!r}")
    return _with_package(
        state,
        lambda pkg: replace(pkg, styles=replace(pkg.styles, **{field.attr: action.value})),
    )


def _go_to_preview(state: AppState, action: GoToPreview) -> AppState:
    if state.step != "edit" or state.package_data is None:
        return state
    return replace(state, step="preview")


def _back_to_editor(state: AppState, action: BackToEditor) -> AppState:
    if state.step != "preview":
        return state
    return replace(state, step="edit", pending_image=None, regen_index=None, regen_prompt="")


def _stage_image(state: AppState, action: StageImage) -> AppState:
    if state.package_data is None or not _is_valid_slot(state.package_data, action.slot):
        return state
    return replace(state, pending_image=PendingImage(slot=action.slot, data_url=action.data_url))


def _apply_image_action(state: AppState, action: ApplyImage) -> AppState:
    return _with_package(state, lambda pkg: _apply_image(pkg, action.slot, action.data_url))


def _confirm_staged_image(state: AppState, action: ConfirmStagedImage) -> AppState:
    pending = state.pending_image
    if pending is None:
        return state
    staged = _with_package(state, lambda pkg: _apply_image(pkg, pending.slot, pending.data_url))
    return replace(staged, pending_image=None)


def _cancel_staged_image(state: AppState, action: CancelStagedImage) -> AppState:
    if state.pending_image is None:
        return state
    return replace(state, pending_image=None)


def _open_regen_prompt(state: AppState, action: OpenRegenPrompt) -> AppState:
    pkg = state.package_data
    if pkg is None or not _in_range(pkg.itinerary, action.day_index):
        return state
    return replace(state, regen_index=action.day_index, regen_prompt="")


def _set_regen_prompt(state: AppState, action: SetRegenPrompt) -> AppState:
    return replace(state, regen_prompt=action.text)


def _close_regen_prompt(state: AppState, action: CloseRegenPrompt) -> AppState:
    return replace(state, regen_index=None, regen_prompt="")


def _image_regenerated(state: AppState, action: ImageRegenerated) -> AppState:
    updated = _with_day(state, action.day_index, lambda day: replace(day, image_url=action.image_url))
    return replace(updated, regen_index=None, regen_prompt="")


_HANDLERS: Dict[Type[object], Callable[[AppState, object], AppState]] = {
    LoadingStarted: _loading_started,
    LoadingFinished: _loading_finished,
    UploadSucceeded: _upload_succeeded,
    ErrorRaised: _error_raised,
    DismissError: _dismiss_error,
    SetField: _set_field,
    SetDayField: _set_day_field,
    SetActivity: _set_activity,
    AddActivity: _add_activity,
    RemoveActivity: _remove_activity,
    SetPricingRow: _set_pricing_row,
    AddPricingRow: _add_pricing_row,
    RemovePricingRow: _remove_pricing_row,
    SetListItem: _set_list_item,
    AddListItem: _add_list_item,
    RemoveListItem: _remove_list_item,
    SetTheme: _set_theme,
    SetStyleField: _set_style_field,
    GoToPreview: _go_to_preview,
    BackToEditor: _back_to_editor,
    StageImage: _stage_image,
    ApplyImage: _apply_image_action,
    ConfirmStagedImage: _confirm_staged_image,
    CancelStagedImage: _cancel_staged_image,
    OpenRegenPrompt: _open_regen_prompt,
    SetRegenPrompt: _set_regen_prompt,
    CloseRegenPrompt: _close_regen_prompt,
    ImageRegenerated: _image_regenerated,
}


def reduce(state: AppState, action: object) -> AppState:
    """
    Aplica `action` sobre `state` y devuelve el estado nuevo.

    Función pura: no muta `state`. Si la acción no cambia nada (índice fuera
    de rango, sin paquete, transición inválida) devuelve el mismo objeto.

    Raises:
        TypeError: acción desconocida.
        ValueError: tema inválido o valor de estilo tipográfico inválido.
    """
    handler = _HANDLERS.get(type(action))
    if handler is None:
        raise TypeError(f"Acción desconocida: {type(action).__name__}")
    return handler(state, action)
