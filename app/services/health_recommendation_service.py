"""Health recommendation service - AI guidance for birth health issues."""

import logging

import httpx

from app.services import ai_provider
from app.services.ai_provider import ChatMessage

logger = logging.getLogger(__name__)


SYSTEM_PROMPT = """You are a pediatric health advisor providing evidence-based recommendations for children with birth health complications.

Your role is to:
- Provide general health management guidance for common newborn health issues
- Suggest monitoring practices and preventive care
- Recommend when to seek professional medical attention
- Be supportive and reassuring while being medically accurate

Important guidelines:
- Always recommend consulting with a pediatrician for diagnosis and treatment
- Focus on general care, nutrition, and monitoring
- Avoid prescribing specific medications
- Be clear about warning signs that require immediate medical attention
- Keep recommendations practical and actionable for parents

Format your response with clear sections for each health issue mentioned."""

USER_PROMPT_TEMPLATE = """Child: {child_name} ({age_label})
Birth Health Issues: {health_issues}

Please provide:
1. Brief explanation of each health issue
2. General care recommendations and monitoring tips
3. Nutritional advice if applicable
4. Warning signs that require immediate medical attention
5. Long-term considerations and follow-up care

Keep the tone supportive and informative for concerned parents."""


class HealthRecommendationError(Exception):
    """Base exception for recommendation failures."""

    pass


class InvalidRecommendationRequestError(HealthRecommendationError):
    """No health issues to ask about."""

    pass


class RecommendationsUnavailableError(HealthRecommendationError):
    """AI gateway is not configured."""

    pass


class RateLimitedError(HealthRecommendationError):
    """Gateway rate limit hit (HTTP 429)."""

    pass


class PaymentRequiredError(HealthRecommendationError):
    """Gateway requires payment (HTTP 402)."""

    pass


class UpstreamError(HealthRecommendationError):
    """Any other gateway or transport failure."""

    pass


def build_messages(health_issues: list[str], child_name: str, age_label: str) -> list[ChatMessage]:
    return [
        ChatMessage(role="system", content=SYSTEM_PROMPT),
        ChatMessage(
            role="user",
            content=USER_PROMPT_TEMPLATE.format(
                child_name=child_name,
                age_label=age_label,
                health_issues=", ".join(health_issues),
            ),
        ),
    ]


async def request_health_recommendations(
    health_issues: list[str] | None,
    child_name: str,
    age_label: str,
) -> str:
    """
    Ask the AI gateway for care guidance on a child's birth health issues.

    Raises:
        InvalidRecommendationRequestError: no health issues given
        RecommendationsUnavailableError: no provider configured
        RateLimitedError / PaymentRequiredError / UpstreamError: gateway failures
    """
    if not health_issues:
        raise InvalidRecommendationRequestError("Health issues are required")

    provider = ai_provider.get_provider()
    if provider is None:
        raise RecommendationsUnavailableError("AI recommendations are not configured")

    try:
        response = await provider.chat(build_messages(health_issues, child_name, age_label))
    except httpx.HTTPStatusError as e:
        status = e.response.status_code
        if status == 429:
            raise RateLimitedError("Rate limit exceeded. Please try again later.") from e
        if status == 402:
            raise PaymentRequiredError(
                "AI service requires payment. Please add credits to your workspace."
            ) from e
        logger.error(f"AI gateway error: {status}")
        raise UpstreamError("AI service error") from e
    except (httpx.HTTPError, KeyError, IndexError, TypeError, ValueError) as e:
        logger.exception(f"AI gateway request failed: {type(e).__name__}")
        raise UpstreamError("AI service error") from e

    return response.content
