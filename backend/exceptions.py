"""
Custom Exceptions for Jordan Yells
Provides structured error handling with error codes and HTTP status mapping.

Detection quality (missing joints, low confidence, analysis in flight) is never
an exception; those are normal analysis outcomes.
"""

from typing import Optional, Dict, Any


class JordanYellsException(Exception):
    """Base exception for all Jordan Yells errors"""

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to API response format"""
        result = {
            "error": self.code,
            "detail": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Resource Errors (404)
# =============================================================================

class ShotNotFound(JordanYellsException):
    """Raised when a shot doesn't exist in the history"""
    def __init__(self, shot_id: str):
        super().__init__(
            f"Shot not found: {shot_id}",
            "SHOT_NOT_FOUND",
            404,
            {"shot_id": shot_id}
        )


# =============================================================================
# Validation Errors (400)
# =============================================================================

class ValidationError(JordanYellsException):
    """Raised when input validation fails"""
    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", 400, details)


class InvalidRating(JordanYellsException):
    """Raised when a shot rating is outside 1-5"""
    def __init__(self, rating: int, min_rating: int = 1, max_rating: int = 5):
        super().__init__(
            f"Invalid rating: {rating} (allowed {min_rating}-{max_rating})",
            "INVALID_RATING",
            400,
            {"rating": rating, "min": min_rating, "max": max_rating}
        )