"""
Página principal y acciones del editor.

- GET  /                  → HTML de la vista actual (upload | edit | preview)
- GET  /api/v1/state      → snapshot JSON del estado
- POST /upload            → extracción + estructuración con IA
- POST /preview, /back    → navegación
- POST /error/dismiss, /credentials/select
- POST /package/...       → campos, tema y estilos
- POST /days/...          → campos y actividades de un día
- POST /pricing/...       → filas de precios
- POST /lists/{name}/...  → inclusions / exclusions

Todas las acciones POST redirigen (303) a `/`.
"""

import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import HTMLResponse

from itinerary_ai_core.controller import AppController
from itinerary_ai_core.doc_engine import package_to_dict
from itinerary_ai_core.state import DayField, ListField, PackageField, StyleField

from ..dependencies import bad_request, get_controller, redirect_home
from ..models.requests import StateResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["editor"])

_PACKAGE_KEYS = {f.value for f in PackageField}
_DAY_KEYS = {f.value for f in DayField if f is not DayField.IMAGE_URL}
_STYLE_KEYS = {f.value for f in StyleField}


def _list_field(name: str) -> ListField:
    try:
        return ListField(name)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Lista desconocida: {name}")


# ============================================================
# Vistas
# ============================================================

@router.get("/", response_class=HTMLResponse)
def index(controller: AppController = Depends(get_controller)):
    """Renderiza la vista del paso actual."""
    return HTMLResponse(controller.renderer.render_page(controller.state))


@router.get("/api/v1/state", response_model=StateResponse)
def get_state(controller: AppController = Depends(get_controller)):
    """Snapshot del estado de la sesión (documento en camelCase)."""
    state = controller.state
    return StateResponse(
        step=state.step,
        is_loading=state.is_loading,
        error=state.error,
        package=package_to_dict(state.package_data) if state.package_data else None,
        pending_image_slot=str(state.pending_image.slot) if state.pending_image else None,
        regen_index=state.regen_index,
        regen_prompt=state.regen_prompt,
    )


# ============================================================
# Upload y navegación
# ============================================================

@router.post("/upload")
async def upload_document(
    file: UploadFile = File(...),
    controller: AppController = Depends(get_controller),
):
    """
    Recibe el documento del itinerario y lo estructura con IA.

    Los errores (formato, documento vacío, fallas de IA) no devuelven 4xx:
    quedan en el banner de error de la página.
    """
    data = await file.read()
    logger.info("📥 Upload recibido: %s (%d bytes)", file.filename, len(data))
    await run_in_threadpool(controller.begin_upload, file.filename or "", data)
    return redirect_home()


@router.post("/preview")
def go_to_preview(controller: AppController = Depends(get_controller)):
    controller.go_to_preview()
    return redirect_home()


@router.post("/back")
def back_to_editor(controller: AppController = Depends(get_controller)):
    controller.back_to_editor()
    return redirect_home()


@router.post("/error/dismiss")
def dismiss_error(controller: AppController = Depends(get_controller)):
    controller.dismiss_error()
    return redirect_home()


@router.post("/credentials/select")
def select_credentials(controller: AppController = Depends(get_controller)):
    controller.select_credentials()
    return redirect_home()


# ============================================================
# Paquete: campos, tema, estilos
# ============================================================

@router.post("/package/fields")
async def set_package_fields(request: Request, controller: AppController = Depends(get_controller)):
    """Aplica cada campo presente en el formulario (claves camelCase)."""
    form = await request.form()
    for key, value in form.items():
        if key in _PACKAGE_KEYS and isinstance(value, str):
            controller.set_field(key, value)
    return redirect_home()


@router.post("/package/theme")
def set_theme(theme: str = Form(...), controller: AppController = Depends(get_controller)):
    try:
        controller.set_theme(theme)  # type: ignore[arg-type]
    except ValueError as e:
        raise bad_request(e)
    return redirect_home()


@router.post("/package/styles")
async def set_styles(request: Request, controller: AppController = Depends(get_controller)):
    form = await request.form()
    updates = {
        key: value for key, value in form.items() if key in _STYLE_KEYS and isinstance(value, str)
    }
    try:
        controller.set_style_fields(updates)
    except ValueError as e:
        raise bad_request(e)
    return redirect_home()


# ============================================================
# Días
# ============================================================

@router.post("/days/{day_index}/fields")
async def set_day_fields(
    day_index: int,
    request: Request,
    controller: AppController = Depends(get_controller),
):
    form = await request.form()
    for key, value in form.items():
        if key in _DAY_KEYS and isinstance(value, str):
            controller.set_day_field(day_index, key, value)
    return redirect_home()


@router.post("/days/{day_index}/activities")
def add_activity(day_index: int, controller: AppController = Depends(get_controller)):
    controller.add_activity(day_index)
    return redirect_home()


@router.post("/days/{day_index}/activities/{activity_index}")
def set_activity(
    day_index: int,
    activity_index: int,
    value: str = Form(""),
    controller: AppController = Depends(get_controller),
):
    controller.set_activity(day_index, activity_index, value)
    return redirect_home()


@router.post("/days/{day_index}/activities/{activity_index}/remove")
def remove_activity(
    day_index: int,
    activity_index: int,
    controller: AppController = Depends(get_controller),
):
    controller.remove_activity(day_index, activity_index)
    return redirect_home()


# ============================================================
# Precios
# ============================================================

@router.post("/pricing")
def add_pricing_row(controller: AppController = Depends(get_controller)):
    controller.add_pricing_row()
    return redirect_home()


@router.post("/pricing/{index}")
def set_pricing_row(
    index: int,
    label: str = Form(None),
    value: str = Form(None),
    controller: AppController = Depends(get_controller),
):
    if label is not None:
        controller.set_pricing_row(index, "label", label)
    if value is not None:
        controller.set_pricing_row(index, "value", value)
    return redirect_home()


@router.post("/pricing/{index}/remove")
def remove_pricing_row(index: int, controller: AppController = Depends(get_controller)):
    controller.remove_pricing_row(index)
    return redirect_home()


# ============================================================
# Inclusions / Exclusions
# ============================================================

@router.post("/lists/{name}")
def add_list_item(name: str, controller: AppController = Depends(get_controller)):
    controller.add_list_item(_list_field(name))
    return redirect_home()


@router.post("/lists/{name}/{index}")
def set_list_item(
    name: str,
    index: int,
    value: str = Form(""),
    controller: AppController = Depends(get_controller),
):
    controller.set_list_item(_list_field(name), index, value)
    return redirect_home()


@router.post("/lists/{name}/{index}/remove")
def remove_list_item(name: str, index: int, controller: AppController = Depends(get_controller)):
    controller.remove_list_item(_list_field(name), index)
    return redirect_home()
