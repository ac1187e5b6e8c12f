"""
API HTTP principal para itinerary-ai-core.

Esta aplicación FastAPI sirve la app de una sola sesión (upload → edit →
preview) y los exports del brochure, usando el core interno
(itinerary_ai_core.controller).

Uso:
    uvicorn api.main:app --reload --port 8000
"""

import logging
import os
from fastapi import FastAPI
from dotenv import load_dotenv

from .routes import editor, exports, images

# Cargar variables de entorno
load_dotenv()

# Determinar ambiente
ENVIRONMENT = os.getenv("ENVIRONMENT", "local")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Configurar logging según ambiente
log_level = getattr(logging, LOG_LEVEL, logging.INFO)
logging.basicConfig(
    level=log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)
logger.info(f"🚀 Iniciando API en ambiente: {ENVIRONMENT}")

app = FastAPI(
    title="Itinerary AI Core API",
    description="Generador de brochures de viaje asistido por IA",
    version="0.1.0",
)

# Registrar rutas
app.include_router(editor.router)
app.include_router(images.router)
app.include_router(exports.router)


@app.get("/health")
async def health():
    """Health check detallado."""
    return {
        "status": "ok",
        "service": "itinerary-ai-core-api",
        "version": "0.1.0",
    }
