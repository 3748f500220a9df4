"""
AI insights service for mood recommendations and productivity insights.

Single prompt/response calls to Claude, returning JSON. The client is
injectable so tests (and alternative providers) can stand in for the API.
"""

import json
import re
from datetime import datetime
from typing import Any, Optional
import anthropic
import structlog

from config import settings
from models.insights import (
    MoodProfile,
    MoodPreferences,
    MoodRequest,
    MoodRecommendation,
    InsightsRequest,
    ProductivityInsights,
)
from exceptions import ExternalServiceError

logger = structlog.get_logger(__name__)


FALLBACK_MOOD = MoodProfile.FOCUSED
FALLBACK_REASONING = "Default recommendation based on business context"
FALLBACK_CONFIDENCE = 0.75

MOOD_SYSTEM_PROMPT = (
    "You are an expert UX designer and behavioral psychologist who specializes "
    "in optimizing digital experiences based on user context and preferences. "
    "Return ONLY valid JSON, no markdown, no explanation."
)

INSIGHTS_SYSTEM_PROMPT = (
    "You are a productivity expert and data analyst specializing in user "
    "behavior optimization. Return ONLY valid JSON, no markdown, no explanation."
)

MOOD_PROMPT = """Recommend a mood profile for a manufacturing operations dashboard.

Current Context:
- Time: {current_time}
- User Activity: {user_activity}
- Current Preferences: Energy {energy}%, Focus {focus}%, Creativity {creativity}%

Available Mood Profiles:
1. energetic - Fast, dynamic transitions (Energy: 90%, Focus: 70%, Creativity: 80%)
2. focused - Smooth, minimal transitions (Energy: 60%, Focus: 95%, Creativity: 50%)
3. creative - Flowing, artistic transitions (Energy: 75%, Focus: 60%, Creativity: 95%)
4. calm - Gentle, relaxing transitions (Energy: 40%, Focus: 80%, Creativity: 70%)
5. productive - Efficient, business-focused transitions (Energy: 85%, Focus: 90%, Creativity: 60%)

Respond with JSON in this exact format:
{{
  "recommendedMood": "mood_id",
  "reasoning": "Brief explanation of why this mood is recommended",
  "confidence": 0.85,
  "adaptations": {{"energy": 75, "focus": 80, "creativity": 65}}
}}"""

INSIGHTS_PROMPT = """Analyze the user's mood and productivity patterns.

Mood History: {mood_history}
User Activity: {user_activity}
Time Spent: {time_spent} minutes

Provide insights about:
1. Most productive mood combinations
2. Optimal transition timing
3. Personalized recommendations

Respond with a JSON object containing actionable insights."""


def parse_json_response(text: str) -> dict:
    """
    Parse a JSON object out of a model reply.

    Strips ```json fences if present.

    Raises:
        ValueError: If the reply is not a JSON object
    """
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = re.sub(r'^```(?:json)?\s*', '', cleaned)
        cleaned = re.sub(r'\s*```$', '', cleaned)

    data = json.loads(cleaned)
    if not isinstance(data, dict):
        raise ValueError("Expected a JSON object")
    return data


class InsightsService:
    """
    Mood and productivity insights backed by an LLM.

    Pass client to use a stub or another Anthropic-compatible client;
    otherwise one is built from ANTHROPIC_API_KEY when configured.
    """

    def __init__(self, client: Optional[Any] = None):
        if client is not None:
            self.client = client
        elif settings.ai_configured:
            self.client = anthropic.Anthropic(api_key=settings.anthropic_api_key)
        else:
            self.client = None

        self.model = settings.ai_model
        self.max_tokens = settings.ai_max_tokens

    @property
    def available(self) -> bool:
        return self.client is not None

    def _complete(self, system: str, prompt: str, temperature: float) -> dict:
        """
        Send one prompt and parse the JSON reply.

        Raises:
            ValueError: If the reply has no text block or is not a JSON object
        """
        response = self.client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=temperature,
            system=system,
            messages=[{"role": "user", "content": prompt}],
        )
        try:
            response_text = response.content[0].text
        except (IndexError, AttributeError, TypeError) as e:
            raise ValueError("AI reply carried no text") from e
        if not isinstance(response_text, str):
            raise ValueError("AI reply carried no text")

        logger.debug("ai_response_received", response_length=len(response_text))
        return parse_json_response(response_text)

    # ===================
    # MOOD
    # ===================

    def recommend_mood(self, request: MoodRequest) -> MoodRecommendation:
        """
        Recommend a UI mood profile for the current context.

        Never raises: if the AI is unavailable or replies with something
        unusable, the focused profile is returned with fallback=True.
        Missing fields in a usable reply are filled from the defaults.
        """
        timestamp = datetime.utcnow().isoformat()

        if not self.available:
            logger.info("ai_not_configured_using_fallback_mood")
            return self._fallback_mood(request, timestamp)

        prompt = MOOD_PROMPT.format(
            current_time=request.current_time or timestamp,
            user_activity=request.user_activity,
            energy=request.preferences.energy,
            focus=request.preferences.focus,
            creativity=request.preferences.creativity,
        )

        try:
            data = self._complete(MOOD_SYSTEM_PROMPT, prompt, temperature=0.7)
        except (anthropic.APIError, ValueError) as e:
            logger.warning("ai_mood_generation_failed", error=str(e), error_type=type(e).__name__)
            return self._fallback_mood(request, timestamp)

        mood = self._parse_mood(data.get("recommendedMood") or data.get("recommended_mood"))
        confidence = self._parse_confidence(data.get("confidence"))

        try:
            adaptations = MoodPreferences(**data["adaptations"])
        except (KeyError, TypeError, ValueError):
            adaptations = request.preferences

        recommendation = MoodRecommendation(
            recommended_mood=mood,
            reasoning=data.get("reasoning") or FALLBACK_REASONING,
            confidence=confidence,
            adaptations=adaptations,
            timestamp=timestamp,
        )

        logger.info(
            "ai_mood_recommended",
            mood=recommendation.recommended_mood.value,
            confidence=recommendation.confidence
        )

        return recommendation

    @staticmethod
    def _parse_mood(value: Any) -> MoodProfile:
        try:
            return MoodProfile(str(value).lower())
        except ValueError:
            return FALLBACK_MOOD

    @staticmethod
    def _parse_confidence(value: Any) -> float:
        try:
            confidence = float(value)
        except (TypeError, ValueError):
            return FALLBACK_CONFIDENCE
        if not 0 <= confidence <= 1:
            return FALLBACK_CONFIDENCE
        return confidence

    @staticmethod
    def _fallback_mood(request: MoodRequest, timestamp: str) -> MoodRecommendation:
        return MoodRecommendation(
            recommended_mood=FALLBACK_MOOD,
            reasoning=FALLBACK_REASONING,
            confidence=FALLBACK_CONFIDENCE,
            adaptations=request.preferences,
            fallback=True,
            timestamp=timestamp,
        )

    # ===================
    # PRODUCTIVITY
    # ===================

    def productivity_insights(self, request: InsightsRequest) -> ProductivityInsights:
        """
        Analyze mood history and activity.

        Raises:
            ExternalServiceError: If the AI is not configured, fails, or
                does not reply with a JSON object
        """
        if not self.available:
            raise ExternalServiceError("ai", "AI insights are not configured")

        prompt = INSIGHTS_PROMPT.format(
            mood_history=json.dumps(request.mood_history, default=str),
            user_activity=request.user_activity,
            time_spent=request.time_spent,
        )

        try:
            insights = self._complete(INSIGHTS_SYSTEM_PROMPT, prompt, temperature=0.6)
        except anthropic.APIError as e:
            logger.error("ai_insights_api_error", error=str(e))
            raise ExternalServiceError("ai", "Failed to generate productivity insights")
        except ValueError as e:
            logger.error("ai_insights_parse_failed", error=str(e))
            raise ExternalServiceError(
                "ai",
                "Failed to generate productivity insights",
                details={"reason": "invalid_json"}
            )

        logger.info("ai_insights_generated", keys=list(insights.keys()))

        return ProductivityInsights(
            insights=insights,
            timestamp=datetime.utcnow().isoformat(),
        )


# Singleton instance for convenience
_insights_service: Optional[InsightsService] = None


def get_insights_service() -> InsightsService:
    """Get or create InsightsService instance."""
    global _insights_service
    if _insights_service is None:
        _insights_service = InsightsService()
    return _insights_service
