from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Tuple

ThemeType = Literal["luxe", "vanguard", "wanderlust"]
FontStyle = Literal["normal", "italic"]

THEMES: Tuple[str, ...] = ("luxe", "vanguard", "wanderlust")
FONT_STYLES: Tuple[str, ...] = ("normal", "italic")


@dataclass(frozen=True)
class ThemeStyles:
    primary_color: str
    accent_color: str
    background_color: str
    heading_font: str
    heading_weight: str        # "300" | "400" | ... | "900"
    heading_style: FontStyle
    body_font: str
    body_weight: str
    body_style: FontStyle


@dataclass(frozen=True)
class PricingRow:
    label: str
    value: str


@dataclass(frozen=True)
class ItineraryDay:
    day: int                   # etiqueta visible; el orden lo da la posición en la tupla
    title: str
    location: str
    activities: Tuple[str, ...] = ()
    description: str = ""
    image_url: str = ""        # URL remota o data URL base64


@dataclass(frozen=True)
class TravelPackage:
    package_name: str
    destination: str
    duration: str
    currency: str
    styles: ThemeStyles
    theme: ThemeType = "luxe"
    pricing: Tuple[PricingRow, ...] = ()
    inclusions: Tuple[str, ...] = ()
    exclusions: Tuple[str, ...] = ()
    itinerary: Tuple[ItineraryDay, ...] = ()
    company_name: str = ""
    logo_url: str = ""
    cover_image_url: str = ""
    contact_details: str = ""
    terms: str = ""


@dataclass(frozen=True)
class ExportArtifact:
    """Resultado descargable de un export (PDF o JPEG)."""
    filename: str
    media_type: str
    content: bytes = field(repr=False)
