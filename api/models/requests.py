"""
Modelos de response para la API.

La app trabaja con formularios HTML; el único endpoint JSON es el snapshot
del estado (`GET /api/v1/state`), pensado para scripts y para los tests.
"""

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field


class StateResponse(BaseModel):
    """
    Snapshot del `AppState` de la sesión.

    El documento se serializa con claves camelCase (misma forma que el esquema
    que devuelve el modelo).
    """

    step: Literal["upload", "edit", "preview"] = Field(..., description="Paso actual")
    is_loading: bool = Field(default=False, description="Hay una operación de IA/export en curso")
    error: Optional[str] = Field(default=None, description="Mensaje de error visible")
    package: Optional[Dict[str, Any]] = Field(default=None, description="TravelPackage actual")

    pending_image_slot: Optional[str] = Field(
        default=None,
        description="Slot de la imagen pendiente de confirmación (cover|logo|índice de día)",
    )
    regen_index: Optional[int] = Field(default=None, description="Día con el prompt de regeneración abierto")
    regen_prompt: str = Field(default="", description="Texto del prompt de regeneración")
