"""
Dialplan HTTP API models.
"""

from typing import List, Optional

from pydantic import BaseModel

from dialplan.routing.models import Direction


class ErrorCode:
    """Error codes returned in ErrorResponse.code."""
    PATTERN_INVALID = "PATTERN_INVALID"
    NO_MATCH = "NO_MATCH"
    CAPTURE_LENGTH_MISMATCH = "CAPTURE_LENGTH_MISMATCH"
    NO_ROUTE = "NO_ROUTE"
    DIALPLAN_UNAVAILABLE = "DIALPLAN_UNAVAILABLE"


# =============================================================================
# Request Models
# =============================================================================

class MatchRequest(BaseModel):
    """Request body for /match"""
    pattern: str
    input: str


class TransformRequest(BaseModel):
    """Request body for /transform.

    ``strict`` overrides DIALPLAN_TRANSFORM_STRICT for this request.
    """
    input: str
    pattern: str
    template: str
    strict: Optional[bool] = None


class RouteRequest(BaseModel):
    """Request body for /route"""
    destination: str
    sender: Optional[str] = None
    direction: Optional[Direction] = None


# =============================================================================
# Response Models
# =============================================================================

class MatchResponse(BaseModel):
    matched: bool
    groups: List[str]
    rest: Optional[str] = None


class TransformResponse(BaseModel):
    result: str


class ClassificationModel(BaseModel):
    name: str
    code: str


class RoutePlanResponse(BaseModel):
    id: str
    direction: Direction
    classification: ClassificationModel
    is_authorized: bool
    destination_endpoint: Optional[str] = None
    transformed_address: Optional[str] = None
    destination_host: Optional[str] = None


class ErrorResponse(BaseModel):
    code: str
    message: str
