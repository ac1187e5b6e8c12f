"""
Taxonomía de errores del core.

Cada clase lleva el mensaje que se le muestra al usuario. Los adaptadores
(ingest, llm_client, export, media) los lanzan encadenando la excepción de la
librería con `raise ... from e`; el controller los atrapa y los escribe en
`AppState.error`.
"""

from __future__ import annotations


class ItineraryError(Exception):
    """Error base. `str(err)` es el mensaje para el usuario."""

    default_message = "An unexpected error occurred."

    def __init__(self, message: str | None = None, status: int | None = None):
        super().__init__(message or self.default_message)
        self.status = status

    @property
    def user_message(self) -> str:
        return str(self)


# --- Upload / extracción ---

class UnsupportedFormat(ItineraryError):
    default_message = "Please upload a .docx, .doc, or .txt file."


class EmptyDocument(ItineraryError):
    default_message = "The uploaded document does not contain any readable text."


class ExtractionFailure(ItineraryError):
    default_message = "Could not read the uploaded document."


class FileTooLarge(ItineraryError):
    default_message = "The selected image is too large."


# --- Etapas de IA ---

class EmptyModelResponse(ItineraryError):
    default_message = "The AI model returned an empty response. Please try with a clearer document."


class MalformedModelOutput(ItineraryError):
    default_message = "Failed to structure the document data correctly. The AI output was malformed."


class RateLimited(ItineraryError):
    default_message = "Rate limit exceeded. Please wait a few seconds before trying again."


class AuthFailure(ItineraryError):
    default_message = "API Key authentication failed. Please check your API key permissions."


class ContentFiltered(ItineraryError):
    default_message = (
        "The document content was flagged by safety filters. "
        "Please ensure it contains travel-related text."
    )


class UnknownAdapterFailure(ItineraryError):
    default_message = "An unexpected error occurred while talking to the AI service."


class NoImageReturned(ItineraryError):
    default_message = (
        "No image was generated. The AI model might be busy or the prompt was restricted."
    )


# --- Export ---

class ExportFailure(ItineraryError):
    default_message = "Export failed. Please try again."
