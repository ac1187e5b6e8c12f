from __future__ import annotations

import base64
import mimetypes
from pathlib import PurePath
from typing import Union

from .config import get_settings
from .errors import FileTooLarge, UnsupportedFormat

"""
itinerary_ai_core.media
=======================

Ingreso de imágenes subidas por el usuario (logo, portada, foto de un día).

- Valida el tamaño contra límites fijos por slot ANTES de leer el contenido.
- Convierte los bytes a un data URL embebible (`data:<mime>;base64,...`),
  que es lo que guarda el documento y lo que entiende WeasyPrint al exportar.
"""

IMAGE_EXT = {".png", ".jpg", ".jpeg", ".webp", ".gif", ".svg"}

# Slots especiales; un int es el índice de un día del itinerario
COVER = "cover"
LOGO = "logo"

ImageSlot = Union[int, str]


def max_bytes_for_slot(slot: ImageSlot) -> int:
    settings = get_settings()
    if slot == LOGO:
        return settings.max_logo_bytes
    if slot == COVER:
        return settings.max_cover_bytes
    return settings.max_day_image_bytes


def check_image_size(slot: ImageSlot, size: int | None) -> None:
    """
    Rechaza imágenes que superan el límite del slot.

    `size` puede ser None cuando el cliente no informó el tamaño; en ese caso
    no se valida acá (se vuelve a validar con los bytes leídos).
    """
    if size is None:
        return
    limit = max_bytes_for_slot(slot)
    if size > limit:
        raise FileTooLarge(
            f"The selected image is too large ({size / 1_048_576:.1f} MB). "
            f"Maximum allowed is {limit / 1_048_576:.1f} MB."
        )


def _guess_mime(filename: str, content_type: str | None) -> str | None:
    if content_type and content_type.startswith("image/"):
        return content_type
    ext = PurePath(filename or "").suffix.lower()
    if ext not in IMAGE_EXT:
        return None
    mime, _ = mimetypes.guess_type(f"x{ext}")
    return mime or "image/png"


def image_bytes_to_data_url(
    slot: ImageSlot,
    filename: str,
    data: bytes,
    content_type: str | None = None,
) -> str:
    """
    Convierte una imagen subida a data URL.

    Raises:
        FileTooLarge: supera el límite del slot.
        UnsupportedFormat: no es una imagen.
    """
    check_image_size(slot, len(data))

    mime = _guess_mime(filename, content_type)
    if mime is None:
        raise UnsupportedFormat("Please select an image file (.png, .jpg, .jpeg, .webp, .gif, .svg).")

    b64 = base64.b64encode(data).decode("ascii")
    return f"data:{mime};base64,{b64}"
