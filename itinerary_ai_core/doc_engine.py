from __future__ import annotations

"""
itinerary_ai_core.doc_engine
============================

Puente entre la salida del modelo (dict parcial, camelCase) y el modelo tipado
(`TravelPackage`).

1) Construcción
   - Completa defaults para cada escalar ausente y tuplas vacías para cada
     arreglo ausente.
   - Migra el esquema viejo de precios (campos fijos `soloBikePrice`, ...)
     a filas dinámicas `pricing`.
   - Inicializa `styles` con el preset del tema.

2) Serialización
   - `package_to_dict` devuelve la forma camelCase (la misma del esquema),
     para el endpoint JSON de estado.
"""

import logging
from dataclasses import asdict
from typing import Any, Dict, List, Mapping, Tuple

from .domain_models import THEMES, ItineraryDay, PricingRow, TravelPackage
from .themes import get_theme_styles

logger = logging.getLogger(__name__)

DEFAULT_PACKAGE_NAME = "Motorcycle Tour"
DEFAULT_DESTINATION = "The Open Road"
DEFAULT_DURATION = "Custom Duration"
DEFAULT_CURRENCY = "USD"
DEFAULT_THEME = "luxe"

# Esquema viejo de precios: (clave, etiqueta) en orden de aparición
LEGACY_PRICE_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("soloBikePrice", "Solo Bike Price"),
    ("dualRiderPrice", "Dual Rider Price"),
    ("ownBikePrice", "Own Bike Price"),
    ("extraPrice", "Extra Price"),
    ("dualSharingExtra", "Dual Sharing Extra"),
    ("singleRoomExtra", "Single Room Extra"),
)


# ============================================================
# Helpers
# ============================================================

def _str(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _str_or(value: Any, default: str) -> str:
    return _str(value) or default


def _str_tuple(value: Any) -> Tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(s for s in (_str(v) for v in value) if s)


def _day_number(value: Any, fallback: int) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return fallback


def _parse_day(raw: Mapping[str, Any], position: int) -> ItineraryDay:
    return ItineraryDay(
        day=_day_number(raw.get("day"), position),
        title=_str(raw.get("title")),
        location=_str(raw.get("location")),
        description=_str(raw.get("description")),
        activities=_str_tuple(raw.get("activities")),
        image_url=_str(raw.get("imageUrl")),
    )


def migrate_legacy_pricing(data: Mapping[str, Any]) -> Tuple[PricingRow, ...]:
    """
    Convierte los campos fijos de precio (revisiones viejas) a filas.

    Los valores vacíos se descartan; el orden es el de `LEGACY_PRICE_FIELDS`.
    """
    rows: List[PricingRow] = []
    for key, label in LEGACY_PRICE_FIELDS:
        value = _str(data.get(key))
        if value:
            rows.append(PricingRow(label=label, value=value))
    return tuple(rows)


def _parse_pricing(data: Mapping[str, Any]) -> Tuple[PricingRow, ...]:
    rows: List[PricingRow] = []
    for raw in data.get("pricing") or []:
        if not isinstance(raw, Mapping):
            continue
        label = _str(raw.get("label"))
        value = _str(raw.get("value"))
        if label or value:
            rows.append(PricingRow(label=label, value=value))

    legacy = migrate_legacy_pricing(data)
    if legacy:
        logger.info("Migrando %d precios del esquema de campos fijos", len(legacy))
    return tuple(rows) + legacy


# ============================================================
# API pública
# ============================================================

def build_travel_package(data: Mapping[str, Any]) -> TravelPackage:
    """
    Construye un `TravelPackage` nuevo a partir de la salida (parcial) del modelo.

    Reglas:
      - escalares ausentes → defaults (`Motorcycle Tour`, `The Open Road`, ...)
      - arreglos ausentes → tuplas vacías
      - branding vacío (`companyName`, `logoUrl`, `coverImageUrl`)
      - tema "luxe" salvo que venga uno válido, `styles` = preset del tema
    """
    theme = _str(data.get("theme"))
    if theme not in THEMES:
        theme = DEFAULT_THEME

    itinerary = tuple(
        _parse_day(raw, position)
        for position, raw in enumerate(data.get("itinerary") or [], start=1)
        if isinstance(raw, Mapping)
    )

    return TravelPackage(
        package_name=_str_or(data.get("packageName"), DEFAULT_PACKAGE_NAME),
        destination=_str_or(data.get("destination"), DEFAULT_DESTINATION),
        duration=_str_or(data.get("duration"), DEFAULT_DURATION),
        currency=_str_or(data.get("currency"), DEFAULT_CURRENCY),
        pricing=_parse_pricing(data),
        inclusions=_str_tuple(data.get("inclusions")),
        exclusions=_str_tuple(data.get("exclusions")),
        itinerary=itinerary,
        company_name=_str(data.get("companyName")),
        logo_url=_str(data.get("logoUrl")),
        cover_image_url=_str(data.get("coverImageUrl")),
        contact_details=_str(data.get("contactDetails")),
        terms=_str(data.get("terms")),
        theme=theme,  # type: ignore[arg-type]
        styles=get_theme_styles(theme),  # type: ignore[arg-type]
    )


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(p.capitalize() for p in rest)


def _camelize(value: Any) -> Any:
    if isinstance(value, dict):
        return {_camel(k): _camelize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_camelize(v) for v in value]
    return value


def package_to_dict(package: TravelPackage) -> Dict[str, Any]:
    """Serializa el paquete con claves camelCase (misma forma que el esquema)."""
    return _camelize(asdict(package))
