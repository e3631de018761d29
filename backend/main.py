"""
FastAPI Application - Jordan Yells Form Coach API
Thin HTTP adapter over the form analysis engine and the shot history.
"""

import base64
import binascii
import logging
from typing import Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from config.settings import get_settings
from core.analyzer import AnalysisCoordinator
from core.keypoints import KeypointSet
from core.shot_history import Shot, ShotHistory
from exceptions import ValidationError
from logging_config import setup_logging
from middleware.error_handler import setup_error_handlers
from middleware.performance import PerformanceMiddleware
from middleware.rate_limiter import limiter, setup_rate_limiting

# Load settings
settings = get_settings()

setup_logging(
    settings.LOG_LEVEL,
    json_format=settings.LOG_JSON or settings.is_production,
    log_file=settings.LOG_FILE
)
logger = logging.getLogger(__name__)

# =============================================================================
# Application Factory
# =============================================================================

def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title=settings.APP_NAME,
        description="Basketball shooting form scoring and coaching feedback",
        version=settings.APP_VERSION,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_url="/openapi.json" if settings.DEBUG else None
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "X-Correlation-ID", "X-Device-ID"],
        max_age=3600,
    )
    app.add_middleware(PerformanceMiddleware)

    setup_error_handlers(app)
    setup_rate_limiting(app)

    return app


app = create_app()

# =============================================================================
# Shared State
# =============================================================================

coordinator = AnalysisCoordinator()
shot_history = ShotHistory(max_shots=settings.MAX_SHOT_HISTORY, daily_goal=settings.DAILY_SHOT_GOAL)

# =============================================================================
# Request/Response Models
# =============================================================================

class KeypointIn(BaseModel):
    x: float = Field(..., ge=0.0, le=1.0, description="Normalized, origin top-left")
    y: float = Field(..., ge=0.0, le=1.0, description="Normalized, y grows downward")
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)


class AnalyzeRequest(BaseModel):
    keypoints: Dict[str, KeypointIn] = Field(..., description="Joint name -> normalized point")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Overall detection confidence")
    save_shot: Optional[bool] = Field(default=None, description="Override AUTO_SAVE_SHOTS")


class ShotCreate(BaseModel):
    feedback: str = Field(..., min_length=1, max_length=500)
    score: Optional[float] = Field(default=None, ge=0.0, le=100.0)
    rating: Optional[int] = None
    image_base64: Optional[str] = Field(default=None, description="Base64 encoded frame")


class RatingUpdate(BaseModel):
    rating: int


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str


def decode_image(image_base64: Optional[str]) -> Optional[bytes]:
    if image_base64 is None:
        return None
    try:
        return base64.b64decode(image_base64, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("image_base64 is not valid base64", field="image_base64")

# =============================================================================
# Health Check Endpoints
# =============================================================================

@app.get("/", response_model=HealthResponse, tags=["Health"])
async def root():
    """Root endpoint - basic health check."""
    return HealthResponse(status="ok", service=settings.APP_NAME, version=settings.APP_VERSION)


@app.get("/health", tags=["Health"])
async def health():
    """Simple health check for load balancers."""
    return {"status": "healthy", "analysis_in_flight": coordinator.is_busy}

# =============================================================================
# Analyze Endpoint
# =============================================================================

@app.post("/api/analyze", tags=["Analysis"])
@limiter.limit(settings.RATE_LIMIT_ANALYZE)
def analyze_frame(request: Request, analyze_request: AnalyzeRequest):
    """
    Score one frame's keypoints.

    Runs in the threadpool, so overlapping requests reach the coordinator
    concurrently and all but one get `busy`.

    Busy, low-confidence and incomplete frames are normal outcomes: they return
    200 with `result: null` and the reason in `status`.
    """
    keypoints = KeypointSet.from_dict(
        {name: kp.model_dump() for name, kp in analyze_request.keypoints.items()},
        confidence=analyze_request.confidence,
    )
    outcome = coordinator.evaluate(keypoints, analyze_request.confidence)

    response = {"status": outcome.status.value, "result": None, "shot_id": None}
    if not outcome.completed:
        return response

    result = outcome.result
    response["result"] = result.to_dict()

    save_shot = settings.AUTO_SAVE_SHOTS if analyze_request.save_shot is None else analyze_request.save_shot
    if save_shot:
        shot = shot_history.add(Shot(feedback=result.summary_feedback, score=result.overall_score))
        response["shot_id"] = shot.shot_id

    return response

# =============================================================================
# Shot History Endpoints
# =============================================================================

@app.get("/api/shots", tags=["Shots"])
async def list_shots(limit: Optional[int] = None):
    """List recorded shots, newest first."""
    return {"shots": [s.to_dict() for s in shot_history.list_shots(limit)]}


@app.post("/api/shots", status_code=201, tags=["Shots"])
@limiter.limit(settings.RATE_LIMIT_SHOTS)
async def create_shot(request: Request, shot_request: ShotCreate):
    """Record a shot with externally generated feedback."""
    shot = shot_history.add(Shot(
        feedback=shot_request.feedback,
        score=shot_request.score,
        rating=shot_request.rating,
        image_data=decode_image(shot_request.image_base64),
    ))
    return shot.to_dict()


@app.get("/api/shots/stats", tags=["Shots"])
async def shot_stats():
    """Totals, average rating and daily goal progress."""
    return shot_history.stats().to_dict()


@app.get("/api/shots/{shot_id}", tags=["Shots"])
async def get_shot(shot_id: str):
    return shot_history.get(shot_id).to_dict()


@app.patch("/api/shots/{shot_id}/rating", tags=["Shots"])
@limiter.limit(settings.RATE_LIMIT_SHOTS)
async def rate_shot(request: Request, shot_id: str, rating_update: RatingUpdate):
    """Set the 1-5 star rating of a shot."""
    return shot_history.update_rating(shot_id, rating_update.rating).to_dict()


@app.delete("/api/shots/{shot_id}", tags=["Shots"])
@limiter.limit(settings.RATE_LIMIT_SHOTS)
async def delete_shot(request: Request, shot_id: str):
    shot_history.remove(shot_id)
    return {"deleted": shot_id}

# =============================================================================
# Main Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8001,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info"
    )
