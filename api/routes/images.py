"""
Imágenes del brochure: subida manual (logo, portada, foto de un día) y
regeneración con IA de la foto de un día.

En `preview` la imagen subida queda pendiente de confirmación
(`/images/staged/confirm|cancel`); en `edit` se aplica directo.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool

from itinerary_ai_core.controller import AppController
from itinerary_ai_core.errors import FileTooLarge
from itinerary_ai_core.media import COVER, LOGO, ImageSlot, check_image_size

from ..dependencies import get_controller, redirect_home

logger = logging.getLogger(__name__)

router = APIRouter(tags=["images"])


def parse_slot(slot: str) -> ImageSlot:
    """`cover` | `logo` | índice de día."""
    if slot in (COVER, LOGO):
        return slot
    try:
        return int(slot)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Slot de imagen desconocido: {slot}")


@router.post("/images/staged/confirm")
def confirm_staged_image(controller: AppController = Depends(get_controller)):
    controller.confirm_staged_image()
    return redirect_home()


@router.post("/images/staged/cancel")
def cancel_staged_image(controller: AppController = Depends(get_controller)):
    controller.cancel_staged_image()
    return redirect_home()


@router.post("/images/{slot}")
async def upload_image(
    slot: str,
    file: UploadFile = File(...),
    controller: AppController = Depends(get_controller),
):
    """
    Sube una imagen para el slot indicado.

    El tamaño informado por el cliente se valida ANTES de leer el archivo.
    """
    image_slot = parse_slot(slot)
    try:
        check_image_size(image_slot, file.size)
    except FileTooLarge as e:
        logger.warning("Imagen demasiado grande para %r: %s", image_slot, e)
        controller.report_error(e)
        return redirect_home()

    data = await file.read()
    controller.request_image_replace(image_slot, file.filename or "", data, file.content_type)
    return redirect_home()


@router.post("/days/{day_index}/regenerate/open")
def open_regen_prompt(day_index: int, controller: AppController = Depends(get_controller)):
    controller.open_regen_prompt(day_index)
    return redirect_home()


@router.post("/days/{day_index}/regenerate/close")
def close_regen_prompt(day_index: int, controller: AppController = Depends(get_controller)):
    controller.close_regen_prompt()
    return redirect_home()


@router.post("/days/{day_index}/regenerate")
async def regenerate_image(
    day_index: int,
    prompt: Optional[str] = Form(None),
    controller: AppController = Depends(get_controller),
):
    """Genera una foto nueva para el día (con instrucciones opcionales)."""
    if prompt is not None:
        controller.set_regen_prompt(prompt)
    await run_in_threadpool(controller.regenerate_image, day_index)
    return redirect_home()
