"""
Tests for the AI health recommendation adapter and endpoint.

The gateway is replaced with httpx.MockTransport; router tests swap the
provider with monkeypatch.
"""
import json

import httpx
import pytest

from app.services import ai_provider, health_recommendation_service
from app.services.ai_provider import ChatResponse, OpenAICompatibleProvider
from app.services.health_recommendation_service import (
    InvalidRecommendationRequestError,
    PaymentRequiredError,
    RateLimitedError,
    RecommendationsUnavailableError,
    UpstreamError,
    request_health_recommendations,
)


def _provider(handler) -> OpenAICompatibleProvider:
    return OpenAICompatibleProvider(
        api_key="test-key",
        base_url="https://gateway.test/v1/",
        default_model="google/gemini-2.5-flash",
        transport=httpx.MockTransport(handler),
    )


def _use(monkeypatch, provider):
    monkeypatch.setattr(ai_provider, "get_provider", lambda: provider)


def _completion(text: str) -> dict:
    return {
        "model": "google/gemini-2.5-flash",
        "choices": [{"message": {"role": "assistant", "content": text}}],
    }


# =============================================================================
# Service
# =============================================================================

@pytest.mark.asyncio
async def test_request_builds_prompt_and_returns_text(monkeypatch):
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["auth"] = request.headers["Authorization"]
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json=_completion("Keep the baby warm."))

    _use(monkeypatch, _provider(handler))

    text = await request_health_recommendations(
        ["Jaundice", "Low birth weight"], "Aarav", "4 months old"
    )

    assert text == "Keep the baby warm."
    assert captured["url"] == "https://gateway.test/v1/chat/completions"
    assert captured["auth"] == "Bearer test-key"
    body = captured["body"]
    assert body["model"] == "google/gemini-2.5-flash"
    assert body["messages"][0]["role"] == "system"
    assert "pediatric health advisor" in body["messages"][0]["content"]
    user_prompt = body["messages"][1]["content"]
    assert user_prompt.startswith("Child: Aarav (4 months old)")
    assert "Birth Health Issues: Jaundice, Low birth weight" in user_prompt


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status,error",
    [
        (429, RateLimitedError),
        (402, PaymentRequiredError),
        (500, UpstreamError),
        (401, UpstreamError),
    ],
)
async def test_gateway_status_mapping(monkeypatch, status, error):
    _use(monkeypatch, _provider(lambda request: httpx.Response(status, json={"error": "x"})))
    with pytest.raises(error):
        await request_health_recommendations(["Jaundice"], "Aarav", "4 months old")


@pytest.mark.asyncio
async def test_transport_failure_is_upstream_error(monkeypatch):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    _use(monkeypatch, _provider(handler))
    with pytest.raises(UpstreamError):
        await request_health_recommendations(["Jaundice"], "Aarav", "4 months old")


@pytest.mark.asyncio
async def test_malformed_gateway_payload_is_upstream_error(monkeypatch):
    _use(monkeypatch, _provider(lambda request: httpx.Response(200, json={"choices": []})))
    with pytest.raises(UpstreamError):
        await request_health_recommendations(["Jaundice"], "Aarav", "4 months old")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"choices": None},
        {"choices": [{"message": {"role": "assistant", "content": None}}]},
        {"choices": [{"message": {"role": "assistant", "content": "   "}}]},
        {"choices": [{"message": None}]},
    ],
)
async def test_null_or_empty_completion_is_upstream_error(monkeypatch, payload):
    _use(monkeypatch, _provider(lambda request: httpx.Response(200, json=payload)))
    with pytest.raises(UpstreamError):
        await request_health_recommendations(["Jaundice"], "Aarav", "4 months old")


@pytest.mark.asyncio
async def test_empty_issue_list_rejected_before_gateway(monkeypatch):
    def handler(request):
        raise AssertionError("gateway must not be called")

    _use(monkeypatch, _provider(handler))
    for issues in (None, []):
        with pytest.raises(InvalidRecommendationRequestError):
            await request_health_recommendations(issues, "Aarav", "4 months old")


@pytest.mark.asyncio
async def test_not_configured(monkeypatch):
    monkeypatch.setattr(ai_provider.settings, "AI_API_KEY", "")
    assert ai_provider.get_provider() is None
    with pytest.raises(RecommendationsUnavailableError):
        await request_health_recommendations(["Jaundice"], "Aarav", "4 months old")


def test_get_provider_from_settings(monkeypatch):
    monkeypatch.setattr(ai_provider.settings, "AI_API_KEY", "secret")
    provider = ai_provider.get_provider()
    assert isinstance(provider, OpenAICompatibleProvider)
    assert provider.default_model == ai_provider.settings.AI_MODEL


# =============================================================================
# API
# =============================================================================

class FakeProvider(ai_provider.AIProvider):
    def __init__(self, error: Exception | None = None):
        self.error = error
        self.messages = None

    async def chat(self, messages, model=None, temperature=None, max_tokens=None):
        if self.error:
            raise self.error
        self.messages = messages
        return ChatResponse(
            content="Monitor feeding and skin colour.",
            prompt_tokens=10,
            completion_tokens=5,
            total_tokens=15,
            model="fake",
        )


@pytest.mark.asyncio
async def test_recommendations_for_stored_child(parent_client, child, monkeypatch):
    provider = FakeProvider()
    _use(monkeypatch, provider)

    response = await parent_client.post(
        "/ai/health-recommendations", json={"child_id": str(child.id)}
    )
    assert response.status_code == 200, response.text
    assert response.json()["recommendations"] == "Monitor feeding and skin colour."
    assert "Birth Health Issues: Jaundice" in provider.messages[1].content
    assert provider.messages[1].content.startswith("Child: Aarav (")


@pytest.mark.asyncio
async def test_recommendations_with_explicit_fields(parent_client, monkeypatch):
    _use(monkeypatch, FakeProvider())
    response = await parent_client.post(
        "/ai/health-recommendations",
        json={"health_issues": ["Premature birth"], "child_name": "Kiara", "age_label": "2 months old"},
    )
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_recommendations_null_choices_is_bad_gateway(parent_client, child, monkeypatch):
    _use(monkeypatch, _provider(lambda request: httpx.Response(200, json={"choices": None})))
    response = await parent_client.post(
        "/ai/health-recommendations", json={"child_id": str(child.id)}
    )
    assert response.status_code == 502


@pytest.mark.asyncio
async def test_recommendations_error_mapping(parent_client, child, monkeypatch):
    request = httpx.Request("POST", "https://gateway.test/v1/chat/completions")
    for status, expected in ((429, 429), (402, 402), (503, 502)):
        error = httpx.HTTPStatusError(
            "gateway error", request=request, response=httpx.Response(status, request=request)
        )
        _use(monkeypatch, FakeProvider(error))
        response = await parent_client.post(
            "/ai/health-recommendations", json={"child_id": str(child.id)}
        )
        assert response.status_code == expected


@pytest.mark.asyncio
async def test_recommendations_unconfigured(parent_client, child, monkeypatch):
    _use(monkeypatch, None)
    response = await parent_client.post(
        "/ai/health-recommendations", json={"child_id": str(child.id)}
    )
    assert response.status_code == 503


@pytest.mark.asyncio
async def test_recommendations_missing_fields(parent_client, monkeypatch):
    _use(monkeypatch, FakeProvider())
    response = await parent_client.post(
        "/ai/health-recommendations", json={"health_issues": ["Jaundice"]}
    )
    assert response.status_code == 422

    response = await parent_client.post(
        "/ai/health-recommendations",
        json={"health_issues": [], "child_name": "Kiara", "age_label": "2 months old"},
    )
    assert response.status_code == 422
