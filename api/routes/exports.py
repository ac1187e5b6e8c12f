"""
Exports del brochure como descargas.

- GET /export/pdf?orientation=portrait|landscape → "<packageName>.pdf"
- GET /export/flyer.jpg                          → "<packageName>_Flyer.jpg"

Sin paquete cargado: 404. Si el export falla, el error queda en el banner
("Export failed. Please try again.") y se redirige a `/`.
"""

import logging
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response

from itinerary_ai_core.config import get_settings
from itinerary_ai_core.controller import AppController
from itinerary_ai_core.domain_models import ExportArtifact
from itinerary_ai_core.export.pdf_weasyprint import ORIENTATIONS

from ..dependencies import get_controller, redirect_home

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/export", tags=["export"])


def attachment_response(artifact: ExportArtifact) -> Response:
    """Descarga con nombre ASCII + `filename*` UTF-8 para nombres con acentos."""
    ascii_name = artifact.filename.encode("ascii", "replace").decode("ascii").replace("?", "_")
    disposition = (
        f'attachment; filename="{ascii_name}"; '
        f"filename*=UTF-8''{quote(artifact.filename)}"
    )
    return Response(
        content=artifact.content,
        media_type=artifact.media_type,
        headers={
            "Content-Disposition": disposition,
            "Cache-Control": "no-cache, no-store, must-revalidate",
        },
    )


def _require_package(controller: AppController) -> None:
    if controller.state.package_data is None:
        raise HTTPException(status_code=404, detail="No hay ningún itinerario cargado")


@router.get("/pdf")
async def export_pdf(
    orientation: Optional[str] = Query(None),
    controller: AppController = Depends(get_controller),
):
    """Brochure completo en PDF A4 (orientación por defecto: `PDF_ORIENTATION`)."""
    orientation = orientation or get_settings().pdf_orientation
    if orientation not in ORIENTATIONS:
        raise HTTPException(status_code=400, detail=f"Orientación inválida: {orientation}")
    _require_package(controller)

    artifact = await run_in_threadpool(controller.export_pdf, orientation)
    if artifact is None:
        return redirect_home()
    logger.info("📄 Descargando %s", artifact.filename)
    return attachment_response(artifact)


@router.get("/flyer.jpg")
async def export_flyer(controller: AppController = Depends(get_controller)):
    """Solo la portada, en JPEG de alta resolución."""
    _require_package(controller)

    artifact = await run_in_threadpool(controller.export_flyer_jpeg)
    if artifact is None:
        return redirect_home()
    logger.info("🖼️ Descargando %s", artifact.filename)
    return attachment_response(artifact)
