from types import SimpleNamespace

import httpx
import openai
import pytest

from itinerary_ai_core import llm_client
from itinerary_ai_core.errors import (
    AuthFailure,
    ContentFiltered,
    EmptyModelResponse,
    MalformedModelOutput,
    NoImageReturned,
    RateLimited,
    UnknownAdapterFailure,
)
from itinerary_ai_core.prompts import build_day_image_prompt


def _status_error(cls, status, body=None):
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    response = httpx.Response(status, request=request)
    return cls("upstream error", response=response, body=body)


class FakeOpenAI:
    """Imita las dos superficies que usa el cliente: chat.completions e images."""

    def __init__(self, completion=None, images=None, error=None):
        self.completion = completion
        self.images_response = images
        self.error = error
        self.calls = []
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))
        self.images = SimpleNamespace(generate=self._generate)

    def _create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.completion

    def _generate(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.images_response


def _completion(content, finish_reason="stop", refusal=None):
    message = SimpleNamespace(content=content, refusal=refusal)
    return SimpleNamespace(choices=[SimpleNamespace(message=message, finish_reason=finish_reason)])


@pytest.fixture
def fake_client(monkeypatch):
    client = FakeOpenAI()
    monkeypatch.setattr(llm_client, "get_client", lambda: client)
    return client


# ============================================================
# Clasificación de errores
# ============================================================

@pytest.mark.parametrize(
    "error, expected",
    [
        (_status_error(openai.RateLimitError, 429), RateLimited),
        (_status_error(openai.AuthenticationError, 401), AuthFailure),
        (_status_error(openai.PermissionDeniedError, 403), AuthFailure),
        (_status_error(openai.BadRequestError, 400, {"code": "content_policy_violation"}), ContentFiltered),
        (_status_error(openai.InternalServerError, 500), UnknownAdapterFailure),
        (RuntimeError("Blocked by SAFETY settings"), ContentFiltered),
        (ValueError("weird"), UnknownAdapterFailure),
    ],
)
def test_classify_openai_error(error, expected):
    assert isinstance(llm_client.classify_openai_error(error), expected)


def test_rate_limit_message():
    err = llm_client.classify_openai_error(_status_error(openai.RateLimitError, 429))
    assert str(err) == "Rate limit exceeded. Please wait a few seconds before trying again."
    assert err.status == 429


def test_unclassified_error_keeps_library_text_out_of_the_message():
    err = llm_client.classify_openai_error(ValueError("upstream connect error: reset by peer"))
    assert str(err) == UnknownAdapterFailure.default_message

    err = llm_client.classify_openai_error(ValueError("weird"), fallback_message="Failed to generate image.")
    assert str(err) == "Failed to generate image."


# ============================================================
# Estructuración
# ============================================================

def test_parse_itinerary_returns_dict(fake_client):
    fake_client.completion = _completion('{"packageName": "Ladakh Expedition", "itinerary": []}')

    data = llm_client.parse_itinerary_from_text("Day 1: Arrive in Ladakh.")

    assert data == {"packageName": "Ladakh Expedition", "itinerary": []}
    call = fake_client.calls[0]
    assert call["response_format"]["type"] == "json_schema"
    assert call["messages"][1]["content"] == "Text: Day 1: Arrive in Ladakh."


@pytest.mark.parametrize("content", ["", "   ", None])
def test_parse_itinerary_empty_response(fake_client, content):
    fake_client.completion = _completion(content)
    with pytest.raises(EmptyModelResponse):
        llm_client.parse_itinerary_from_text("x")


def test_parse_itinerary_without_choices(fake_client):
    fake_client.completion = SimpleNamespace(choices=[])
    with pytest.raises(EmptyModelResponse):
        llm_client.parse_itinerary_from_text("x")


@pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
def test_parse_itinerary_malformed(fake_client, content):
    fake_client.completion = _completion(content)
    with pytest.raises(MalformedModelOutput):
        llm_client.parse_itinerary_from_text("x")


def test_parse_itinerary_content_filter(fake_client):
    fake_client.completion = _completion("", finish_reason="content_filter")
    with pytest.raises(ContentFiltered):
        llm_client.parse_itinerary_from_text("x")


def test_parse_itinerary_transport_error_is_classified(fake_client):
    fake_client.error = _status_error(openai.RateLimitError, 429)
    with pytest.raises(RateLimited):
        llm_client.parse_itinerary_from_text("x")
    # un solo intento
    assert len(fake_client.calls) == 1


# ============================================================
# Imágenes
# ============================================================

def test_generate_day_image_returns_data_url(fake_client):
    fake_client.images_response = SimpleNamespace(data=[SimpleNamespace(b64_json="QUJD")])

    url = llm_client.generate_day_image("Leh", "Arrival", "Acclimatize", "prayer flags")

    assert url == "data:image/png;base64,QUJD"
    call = fake_client.calls[0]
    assert call["size"] == "1536x1024"
    assert call["prompt"].endswith("Additionally, focus on: prayer flags")


def test_generate_day_image_without_data(fake_client):
    fake_client.images_response = SimpleNamespace(data=[SimpleNamespace(b64_json=None)])
    with pytest.raises(NoImageReturned):
        llm_client.generate_day_image("Leh", "Arrival", "")


def test_generate_day_image_safety_message(fake_client):
    fake_client.error = _status_error(openai.BadRequestError, 400, {"code": "moderation_blocked"})
    with pytest.raises(ContentFiltered) as excinfo:
        llm_client.generate_day_image("Leh", "Arrival", "")
    assert str(excinfo.value) == llm_client.IMAGE_SAFETY_MESSAGE


def test_day_image_prompt_template():
    prompt = build_day_image_prompt("Leh", "Arrival", "Acclimatize")
    assert prompt.startswith("A high-end, professional travel photograph of Leh.")
    assert "Topic: Arrival. Description: Acclimatize." in prompt
    assert "Additionally" not in build_day_image_prompt("Leh", "A", "B", "   ")
