from __future__ import annotations

import io
import logging
from pathlib import PurePath
from typing import List

from docx import Document

from .errors import EmptyDocument, ExtractionFailure, UnsupportedFormat

"""
itinerary_ai_core.ingest
========================

Adaptador de extracción de texto (archivo subido → texto plano).

Responsabilidad
----------------
- Detectar el tipo de archivo por extensión
- `.docx` → texto vía python-docx (párrafos y celdas de tablas)
- `.txt` / `.doc` → lectura directa como texto

NO hace:
---------
- Llamadas a LLM
- Cambios de estado de la app

Diseño
------
- Función pura: bytes → texto
- La extensión se valida ANTES de leer el contenido
"""

logger = logging.getLogger(__name__)

# ============================================================
# Extensiones soportadas
# ============================================================

DOCX_EXT = {".docx"}
TEXT_EXT = {".txt", ".doc"}
SUPPORTED_EXT = DOCX_EXT | TEXT_EXT


def kind_from_filename(filename: str) -> str | None:
    """
    Devuelve el tipo lógico del archivo a partir de la extensión.

    Retorna:
    --------
    - "docx" | "text"
    - None si la extensión no está soportada
    """
    ext = PurePath(filename or "").suffix.lower()
    if ext in DOCX_EXT:
        return "docx"
    if ext in TEXT_EXT:
        return "text"
    return None


# ============================================================
# Helpers
# ============================================================

def _docx_to_text(data: bytes) -> str:
    document = Document(io.BytesIO(data))

    lines: List[str] = [p.text for p in document.paragraphs]

    # Muchos itinerarios vienen armados en tablas (día | actividades)
    for table in document.tables:
        for row in table.rows:
            cells = [c.text.strip() for c in row.cells if c.text.strip()]
            if cells:
                lines.append(" | ".join(cells))

    return "\n".join(lines)


def _bytes_to_text(data: bytes) -> str:
    # utf-8-sig tolera el BOM que agregan algunos editores en Windows
    return data.decode("utf-8-sig", errors="replace")


# ============================================================
# API pública
# ============================================================

def extract_text(filename: str, data: bytes) -> str:
    """
    Extrae texto plano de un archivo subido.

    Args:
        filename: Nombre original del archivo (se usa solo la extensión).
        data: Contenido binario.

    Returns:
        Texto extraído, sin espacios al inicio/fin.

    Raises:
        UnsupportedFormat: extensión distinta de .docx/.doc/.txt.
        EmptyDocument: el texto extraído está vacío.
        ExtractionFailure: la librería de lectura falló.
    """
    kind = kind_from_filename(filename)
    if kind is None:
        raise UnsupportedFormat()

    try:
        text = _docx_to_text(data) if kind == "docx" else _bytes_to_text(data)
    except Exception as e:
        logger.warning("No se pudo extraer texto de %s: %s", filename, e)
        raise ExtractionFailure(f"Could not read the uploaded document: {e}") from e

    text = text.strip()
    if not text:
        raise EmptyDocument()

    logger.info("📄 Texto extraído de %s (%d caracteres)", filename, len(text))
    return text
