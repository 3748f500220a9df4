"""
AI mood and productivity insight schemas.
"""

from pydantic import Field
from typing import Any, Optional
from enum import Enum

from models.base import BaseSchema, camel_field


class MoodProfile(str, Enum):
    """UI mood profiles the assistant can recommend."""
    ENERGETIC = "energetic"
    FOCUSED = "focused"
    CREATIVE = "creative"
    CALM = "calm"
    PRODUCTIVE = "productive"


class MoodPreferences(BaseSchema):
    """Energy / focus / creativity levels, 0-100."""

    energy: int = Field(50, ge=0, le=100)
    focus: int = Field(50, ge=0, le=100)
    creativity: int = Field(50, ge=0, le=100)


class MoodRequest(BaseSchema):
    """Context for a mood recommendation."""

    current_time: Optional[str] = camel_field("current_time", None)
    user_activity: str = camel_field("user_activity", "browsing")
    preferences: MoodPreferences = Field(default_factory=MoodPreferences)


class MoodRecommendation(BaseSchema):
    """Mood suggested for the current context."""

    recommended_mood: MoodProfile
    reasoning: str
    confidence: float = Field(..., ge=0, le=1)
    adaptations: MoodPreferences
    fallback: bool = Field(False, description="True when the AI was unavailable")
    timestamp: str


class InsightsRequest(BaseSchema):
    """Mood history and activity to analyze."""

    mood_history: list[dict[str, Any]] = camel_field("mood_history", default_factory=list)
    user_activity: str = camel_field("user_activity", "browsing")
    time_spent: int = camel_field("time_spent", 0, ge=0, description="Minutes")


class ProductivityInsights(BaseSchema):
    """Free-form insights returned by the AI."""

    insights: dict[str, Any]
    timestamp: str
