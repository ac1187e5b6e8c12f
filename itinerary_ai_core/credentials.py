"""
Hook de credenciales.

El entorno provee una capacidad para saber si hay una API key elegida y para
pedirle al usuario que elija otra. El controller la consulta antes de regenerar
imágenes y cuando una llamada falla con `AuthFailure`.
"""

from __future__ import annotations

import logging
from typing import Protocol

from dotenv import load_dotenv

from .config import get_settings

logger = logging.getLogger(__name__)


class CredentialProvider(Protocol):
    def has_selected_key(self) -> bool:
        ...

    def open_select_key(self) -> None:
        ...


class EnvCredentialProvider:
    """
    Implementación local: la key vive en `OPENAI_API_KEY` (entorno o `.env`).

    "Elegir otra key" significa releer `.env` y descartar la configuración
    cacheada, así el próximo llamado a OpenAI usa la key actualizada.
    """

    def has_selected_key(self) -> bool:
        return bool(get_settings().openai_api_key)

    def open_select_key(self) -> None:
        load_dotenv(override=True)
        get_settings.cache_clear()
        if self.has_selected_key():
            logger.info("🔑 Credenciales recargadas desde el entorno")
        else:
            logger.warning(
                "🔑 OPENAI_API_KEY no está configurada. Definila en el .env y reintentá."
            )
