"""Rutas de la API."""

from . import editor, exports, images

__all__ = ["editor", "exports", "images"]
