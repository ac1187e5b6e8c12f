from __future__ import annotations

import json
import logging
from typing import Any, Dict

import openai
from openai import OpenAI

from .config import get_settings
from .errors import (
    AuthFailure,
    ContentFiltered,
    EmptyModelResponse,
    ItineraryError,
    MalformedModelOutput,
    NoImageReturned,
    RateLimited,
    UnknownAdapterFailure,
)
from .prompts import (
    ITINERARY_SYSTEM_PROMPT,
    TRAVEL_PACKAGE_SCHEMA,
    build_day_image_prompt,
    build_itinerary_user_prompt,
)

"""
itinerary_ai_core.llm_client
============================

Adaptadores contra OpenAI:

- `parse_itinerary_from_text`: texto libre → dict parcial con forma de
  TravelPackage (JSON restringido por esquema).
- `generate_day_image`: descripción de un día → data URL de una imagen.

Cada llamada es UN solo intento (`max_retries=0`): el que llama decide si
reintenta. Las fallas de transporte se clasifican en la taxonomía de
`errors.py`.
"""

logger = logging.getLogger(__name__)

_CONTENT_POLICY_CODES = {"content_policy_violation", "moderation_blocked", "content_filter"}

IMAGE_SAFETY_MESSAGE = (
    "Image generation blocked due to safety policies. Try modifying the location or title."
)


def get_client() -> OpenAI:
    settings = get_settings()
    # Sin key no fallamos acá: OpenAI responde 401 y se clasifica como AuthFailure.
    return OpenAI(api_key=settings.openai_api_key or "missing", max_retries=0)


def classify_openai_error(
    e: Exception,
    *,
    content_filtered_message: str | None = None,
    fallback_message: str | None = None,
) -> ItineraryError:
    """
    Traduce una excepción del SDK de OpenAI a la taxonomía de `errors.py`.

    Reglas:
      - 429 → RateLimited
      - 401 / 403 → AuthFailure
      - rechazo por políticas de contenido → ContentFiltered
      - cualquier otra cosa → UnknownAdapterFailure
    """
    if isinstance(e, ItineraryError):
        return e

    status = getattr(e, "status_code", None)
    code = str(getattr(e, "code", "") or "")
    text = str(e)

    if isinstance(e, openai.RateLimitError) or status == 429:
        return RateLimited(status=429)
    if isinstance(e, (openai.AuthenticationError, openai.PermissionDeniedError)) or status in (401, 403):
        return AuthFailure(status=status or 401)
    if code in _CONTENT_POLICY_CODES or "SAFETY" in text.upper():
        return ContentFiltered(content_filtered_message, status=status)

    logger.warning("Falla no clasificada de OpenAI (%s): %s", status, text)
    return UnknownAdapterFailure(fallback_message, status=status)


# ============================================================
# Estructuración de itinerarios
# ============================================================

def parse_itinerary_from_text(text: str) -> Dict[str, Any]:
    """
    Pide al modelo de texto la extracción estructurada del itinerario.

    Returns:
        Dict parcial (camelCase, tal cual el esquema). Los defaults los completa
        `doc_engine.build_travel_package`.

    Raises:
        EmptyModelResponse, MalformedModelOutput, ContentFiltered,
        RateLimited, AuthFailure, UnknownAdapterFailure
    """
    settings = get_settings()
    client = get_client()

    try:
        completion = client.chat.completions.create(
            model=settings.openai_model_text,
            messages=[
                {"role": "system", "content": ITINERARY_SYSTEM_PROMPT},
                {"role": "user", "content": build_itinerary_user_prompt(text)},
            ],
            response_format={
                "type": "json_schema",
                "json_schema": {
                    "name": "travel_package",
                    "schema": TRAVEL_PACKAGE_SCHEMA,
                },
            },
            temperature=0.1,
        )
    except Exception as e:
        logger.warning("Falló la estructuración del itinerario: %s", e)
        raise classify_openai_error(
            e,
            fallback_message="An unexpected error occurred while analyzing the document.",
        ) from e

    choice = completion.choices[0] if completion.choices else None
    if choice is None:
        raise EmptyModelResponse()

    if choice.finish_reason == "content_filter" or getattr(choice.message, "refusal", None):
        raise ContentFiltered()

    raw = (choice.message.content or "").strip()
    if not raw:
        raise EmptyModelResponse()

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.error("JSON inválido devuelto por el modelo: %s", raw[:500])
        raise MalformedModelOutput() from e

    if not isinstance(data, dict):
        logger.error("El modelo devolvió %s en lugar de un objeto", type(data).__name__)
        raise MalformedModelOutput()

    return data


# ============================================================
# Imágenes
# ============================================================

def generate_day_image(
    location: str,
    title: str,
    description: str,
    custom_prompt: str | None = None,
) -> str:
    """
    Genera UNA imagen apaisada para un día del itinerario.

    Returns:
        Data URL `data:image/png;base64,...`.

    Raises:
        NoImageReturned, ContentFiltered, RateLimited, AuthFailure,
        UnknownAdapterFailure
    """
    settings = get_settings()
    client = get_client()
    prompt = build_day_image_prompt(location, title, description, custom_prompt)

    kwargs: Dict[str, Any] = {
        "model": settings.openai_model_image,
        "prompt": prompt,
        "size": settings.openai_image_size,
        "n": 1,
    }
    # Los modelos dall-e devuelven URL salvo que se pida base64
    if settings.openai_model_image.startswith("dall-e"):
        kwargs["response_format"] = "b64_json"

    try:
        response = client.images.generate(**kwargs)
    except Exception as e:
        logger.warning("Falló la generación de imagen para %r: %s", title, e)
        raise classify_openai_error(
            e,
            content_filtered_message=IMAGE_SAFETY_MESSAGE,
            fallback_message="Failed to generate image.",
        ) from e

    for item in response.data or []:
        b64 = getattr(item, "b64_json", None)
        if b64:
            return f"data:image/png;base64,{b64}"

    raise NoImageReturned()
