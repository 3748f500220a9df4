"""
AI API routes.

Mood recommendation and productivity insights.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
import structlog

from models.insights import (
    MoodRequest,
    MoodRecommendation,
    InsightsRequest,
    ProductivityInsights,
)
from services.insights_service import get_insights_service
from exceptions import AppError

logger = structlog.get_logger(__name__)

router = APIRouter()


def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_dict()
        )
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred"
            }
        }
    )


@router.post("/generate-mood", response_model=MoodRecommendation)
async def generate_mood(request: MoodRequest):
    """
    Recommend a UI mood profile.

    Always answers: falls back to "focused" (fallback=true) when the AI
    is unavailable.
    """
    try:
        service = get_insights_service()
        return service.recommend_mood(request)

    except Exception as e:
        return handle_error(e)


@router.post("/productivity-insights", response_model=ProductivityInsights)
async def productivity_insights(request: InsightsRequest):
    """
    Insights from mood history and activity.

    Raises:
        503: AI not configured or failed
    """
    try:
        service = get_insights_service()
        return service.productivity_insights(request)

    except Exception as e:
        return handle_error(e)
