# itinerary_ai_core/prompts.py

"""
Prompts, esquema de salida y plantillas para las llamadas a OpenAI.
"""

from __future__ import annotations

from typing import Any, Dict

ITINERARY_SYSTEM_PROMPT = """
You are an expert travel consultant for motorcycle tours. Extract and structure
travel package details from the provided text.

The user specifically wants the itinerary to maintain the "day-wise pointers"
format seen in the source document.

Focus on extracting:
- Package Name, Destination, Duration, Currency.
- Pricing: every price line in the document as a {label, value} row, keeping the
  document order (e.g. Solo bike, Dual rider, Own bike, Extra prices,
  Dual sharing extra, Single room extra). Do not invent prices.
- Inclusions & Exclusions as short bullet strings.
- Itinerary: for each day, extract the Title, Location, an optional short
  Description, and the list of specific "Activities" or "Pointers" as shown in
  the document.

Respond ONLY with JSON that matches the provided schema.
""".strip()

_STRING = {"type": "string"}
_STRING_ARRAY = {"type": "array", "items": _STRING}

TRAVEL_PACKAGE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "packageName": _STRING,
        "destination": _STRING,
        "duration": _STRING,
        "currency": _STRING,
        "pricing": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {"label": _STRING, "value": _STRING},
                "required": ["label", "value"],
            },
        },
        "inclusions": _STRING_ARRAY,
        "exclusions": _STRING_ARRAY,
        "itinerary": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "day": {"type": "number"},
                    "title": _STRING,
                    "description": {
                        "type": "string",
                        "description": "A summary of the day if available",
                    },
                    "location": _STRING,
                    "activities": {
                        "type": "array",
                        "items": _STRING,
                        "description": "The day-wise pointers/bullet points from the document",
                    },
                },
                "required": ["day", "title", "location", "activities"],
            },
        },
    },
    "required": ["packageName", "destination", "itinerary"],
}


def build_itinerary_user_prompt(text: str) -> str:
    return f"Text: {text}"


DAY_IMAGE_TEMPLATE = (
    "A high-end, professional travel photograph of {location}. "
    "Topic: {title}. Description: {description}. "
    "Cinematic lighting, 8k resolution, National Geographic photography style."
)


def build_day_image_prompt(
    location: str,
    title: str,
    description: str,
    custom_prompt: str | None = None,
) -> str:
    """
    Arma el prompt fijo para la foto de un día. El `custom_prompt`, si viene,
    se agrega como foco adicional al final.
    """
    prompt = DAY_IMAGE_TEMPLATE.format(location=location, title=title, description=description)
    if custom_prompt and custom_prompt.strip():
        prompt = f"{prompt} Additionally, focus on: {custom_prompt.strip()}"
    return prompt
