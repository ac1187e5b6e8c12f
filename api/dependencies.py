"""
Dependencias de FastAPI.

La app es de una sola sesión: hay un único `AppController` por proceso. Los
tests lo reemplazan con `app.dependency_overrides[get_controller]`.
"""

import logging
import threading
from typing import Optional

from fastapi import HTTPException
from fastapi.responses import RedirectResponse

from itinerary_ai_core.controller import AppController

logger = logging.getLogger(__name__)

_controller: Optional[AppController] = None
_controller_lock = threading.Lock()


def get_controller() -> AppController:
    """Devuelve el controller de la sesión (lo crea la primera vez)."""
    global _controller
    with _controller_lock:
        if _controller is None:
            logger.info("🧭 Creando sesión nueva")
            _controller = AppController()
        return _controller


def redirect_home() -> RedirectResponse:
    """Toda acción de formulario vuelve a la página principal (303 → GET /)."""
    return RedirectResponse("/", status_code=303)


def bad_request(e: ValueError) -> HTTPException:
    return HTTPException(status_code=400, detail=str(e))
