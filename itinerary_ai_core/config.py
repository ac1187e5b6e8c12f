# itinerary_ai_core/config.py
from dataclasses import dataclass
from functools import lru_cache
import os

from dotenv import load_dotenv

"""
itinerary_ai_core.config
========================

Gestión centralizada de configuración de la aplicación.

Este módulo define:
- La estructura de configuración (`Settings`)
- El mecanismo para cargar variables desde entorno (.env)
- Un acceso único y cacheado a la configuración (`get_settings`)

Convenciones
------------
- Las variables de entorno se cargan desde un archivo `.env` si existe.
- Los defaults están pensados para uso local (una sola sesión, un solo usuario).
- Si falta la API key NO se falla acá: el error aparece donde se usa OpenAI
  y se clasifica como `AuthFailure`.
- `get_settings.cache_clear()` permite releer el entorno cuando el usuario
  vuelve a elegir credenciales (ver `credentials.EnvCredentialProvider`).
"""

# Cargar variables de entorno desde .env (si existe)
load_dotenv()

MIB = 1024 * 1024


@dataclass
class Settings:
    """
    Contenedor tipado de configuración global.

    Attributes
    ----------
    openai_api_key:
        API key de OpenAI. Se usa tal cual, sin validación previa.
    openai_model_text:
        Modelo de texto que estructura el itinerario a JSON.
    openai_model_image:
        Modelo de imágenes para regenerar la foto de un día.
    openai_image_size:
        Tamaño fijo (apaisado) de las imágenes generadas.
    max_logo_bytes / max_cover_bytes / max_day_image_bytes:
        Límites de tamaño para imágenes subidas por el usuario. Se validan
        antes de leer el contenido.
    flyer_jpeg_dpi:
        Resolución del raster del flyer (384 dpi = 4x el px CSS).
    pdf_orientation:
        Orientación por defecto del PDF ("portrait" | "landscape").
    """

    # OpenAI
    openai_api_key: str
    openai_model_text: str
    openai_model_image: str
    openai_image_size: str = "1536x1024"

    # Límites de imágenes subidas
    max_logo_bytes: int = 2 * MIB
    max_cover_bytes: int = 8 * MIB
    max_day_image_bytes: int = 5 * MIB

    # Export
    flyer_jpeg_dpi: int = 384
    pdf_orientation: str = "portrait"


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@lru_cache
def get_settings() -> Settings:
    """
    Devuelve una instancia única y cacheada de `Settings`.

    Variables de entorno utilizadas
    -------------------------------
    - OPENAI_API_KEY
    - OPENAI_MODEL_TEXT (default: "gpt-4.1-mini")
    - OPENAI_MODEL_IMAGE (default: "gpt-image-1")
    - OPENAI_IMAGE_SIZE (default: "1536x1024")
    - MAX_LOGO_BYTES, MAX_COVER_BYTES, MAX_DAY_IMAGE_BYTES
    - FLYER_JPEG_DPI (default: 384)
    - PDF_ORIENTATION (default: "portrait")
    """
    orientation = os.getenv("PDF_ORIENTATION", "portrait").strip().lower()
    if orientation not in {"portrait", "landscape"}:
        orientation = "portrait"

    return Settings(
        openai_api_key=os.getenv("OPENAI_API_KEY", ""),
        openai_model_text=os.getenv("OPENAI_MODEL_TEXT", "gpt-4.1-mini"),
        openai_model_image=os.getenv("OPENAI_MODEL_IMAGE", "gpt-image-1"),
        openai_image_size=os.getenv("OPENAI_IMAGE_SIZE", "1536x1024"),
        max_logo_bytes=_int_env("MAX_LOGO_BYTES", 2 * MIB),
        max_cover_bytes=_int_env("MAX_COVER_BYTES", 8 * MIB),
        max_day_image_bytes=_int_env("MAX_DAY_IMAGE_BYTES", 5 * MIB),
        flyer_jpeg_dpi=_int_env("FLYER_JPEG_DPI", 384),
        pdf_orientation=orientation,
    )
