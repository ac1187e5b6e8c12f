"""
Presets de tema (presentación) para el render del brochure.

Cada tema define un `ThemeStyles` completo. El preset solo se consulta cuando
se elige un tema (o al construir un paquete nuevo); después `styles` evoluciona
por su cuenta con los overrides campo a campo que haga el usuario.
"""

from __future__ import annotations

from typing import Dict, List

from .domain_models import THEMES, ThemeStyles, ThemeType


# ============================================================
# Presets predefinidos
# ============================================================

LUXE = ThemeStyles(
    primary_color="#111111",
    accent_color="#b8935a",
    background_color="#ffffff",
    heading_font="Playfair Display",
    heading_weight="700",
    heading_style="italic",
    body_font="Lato",
    body_weight="300",
    body_style="normal",
)

VANGUARD = ThemeStyles(
    primary_color="#18181b",
    accent_color="#e11d48",
    background_color="#fafafa",
    heading_font="Montserrat",
    heading_weight="900",
    heading_style="normal",
    body_font="Inter",
    body_weight="400",
    body_style="normal",
)

WANDERLUST = ThemeStyles(
    primary_color="#3f2d20",
    accent_color="#c2410c",
    background_color="#fdfbf7",
    heading_font="Cormorant Garamond",
    heading_weight="600",
    heading_style="normal",
    body_font="Source Serif Pro",
    body_weight="400",
    body_style="normal",
)

_PRESETS: Dict[str, ThemeStyles] = {
    "luxe": LUXE,
    "vanguard": VANGUARD,
    "wanderlust": WANDERLUST,
}

THEME_LABELS: Dict[str, str] = {
    "luxe": "Classic Luxe",
    "vanguard": "Modern Vanguard",
    "wanderlust": "Adventurous Wanderlust",
}

# Lista cerrada que ofrece la UI; el modelo acepta cualquier string.
FONT_OPTIONS: List[str] = [
    "Playfair Display",
    "Cormorant Garamond",
    "Montserrat",
    "Inter",
    "Lato",
    "Source Serif Pro",
    "Oswald",
    "Georgia",
    "Helvetica Neue",
]

WEIGHT_OPTIONS: List[str] = ["300", "400", "500", "600", "700", "800", "900"]


# ============================================================
# Selector de preset
# ============================================================

def get_theme_styles(theme: ThemeType) -> ThemeStyles:
    """
    Devuelve el preset completo de `theme`.

    Raises
    ------
    ValueError
        Si `theme` no es uno de "luxe", "vanguard", "wanderlust".
    """
    if theme not in _PRESETS:
        raise ValueError(f"Tema desconocido: {theme!r} (esperado uno de {', '.join(THEMES)})")
    return _PRESETS[theme]
