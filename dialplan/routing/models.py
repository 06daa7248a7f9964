"""Route and route plan data models.

Routes describe a call leg as configured in the dial plan; plans describe the
routing decision produced for it. Both are immutable value types.
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class Direction(str, Enum):
    """Direction of a route relative to the switch."""
    INBOUND = "inbound"
    OUTBOUND = "outbound"


@dataclass(frozen=True)
class RouteClassification:
    """Human-readable name and stable code for a routed number."""
    name: str
    code: str


LOCAL = RouteClassification("Local", "LOCAL")
TOLL_FREE = RouteClassification("Toll Free", "TOLLFREE")
LONG_DISTANCE = RouteClassification("Long Distance", "LONGDISTANCE")
INTERNATIONAL = RouteClassification("International", "INTERNATIONAL")
UNKNOWN = RouteClassification("Unknown", "UNKNOWN")


def _new_id() -> str:
    return str(uuid.uuid4())


# =============================================================================
# Routes
# =============================================================================

@dataclass(frozen=True, kw_only=True)
class Route:
    """A dial plan route.

    ``receiver_address`` and ``sender_address`` hold telco expressions, the
    bare wildcard "*", or a digit prefix followed by "*".
    """

    id: str = field(default_factory=_new_id)
    organization_id: str = ""
    protocol: str = ""
    location: str = ""
    sender_address: str = ""
    receiver_address: str = ""

    direction = Direction.INBOUND


@dataclass(frozen=True, kw_only=True)
class InboundRoute(Route):
    normalized_address: str = ""
    matched_endpoint: str = ""

    direction = Direction.INBOUND


@dataclass(frozen=True, kw_only=True)
class OutboundRoute(Route):
    """Outbound route; ``transformer`` is an optional output template."""

    matched_pattern: str = ""
    transformer: Optional[str] = None

    direction = Direction.OUTBOUND

    @property
    def pattern(self) -> str:
        return self.matched_pattern or self.receiver_address


@dataclass(frozen=True, kw_only=True)
class InboundCallRoute(InboundRoute):
    caller_id: str = ""
    called_number: str = ""
    dnis: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class OutboundCallRoute(OutboundRoute):
    telco_pattern: Optional[str] = None
    caller_id: str = ""
    destination_number: str = ""

    @property
    def pattern(self) -> str:
        return self.telco_pattern or super().pattern


# =============================================================================
# Route Plans
# =============================================================================

@dataclass(frozen=True, kw_only=True)
class RoutePlan:
    """Routing decision for a single destination."""

    id: str = field(default_factory=_new_id)
    classification: RouteClassification = UNKNOWN
    is_authorized: bool = False
    destination_endpoint: Optional[str] = None
    transformed_address: Optional[str] = None
    destination_host: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class InboundRoutePlan(RoutePlan):
    matched_endpoint: str = ""
    transformed_endpoint: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class OutboundRoutePlan(RoutePlan):
    matched_pattern: str = ""


@dataclass(frozen=True, kw_only=True)
class InboundCallRoutePlan(InboundRoutePlan):
    normalized_caller_id: str = ""
    normalized_called_number: str = ""
    assigned_endpoint: str = ""


@dataclass(frozen=True, kw_only=True)
class OutboundCallRoutePlan(OutboundRoutePlan):
    normalized_caller_id: str = ""
    normalized_destination: str = ""
    assigned_endpoint: Optional[str] = None
