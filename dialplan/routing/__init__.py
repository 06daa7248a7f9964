# Dialplan Routing - Routes, route plans and the routing engine

from dialplan.routing.models import (
    Direction,
    RouteClassification,
    Route,
    InboundRoute,
    OutboundRoute,
    InboundCallRoute,
    OutboundCallRoute,
    RoutePlan,
    InboundRoutePlan,
    OutboundRoutePlan,
    InboundCallRoutePlan,
    OutboundCallRoutePlan,
)
from dialplan.routing.engine import RoutingEngine, normalize_address
from dialplan.routing.rules import DialPlan, RouteRule, load_dial_plan

__all__ = [
    # Models
    "Direction",
    "RouteClassification",
    "Route",
    "InboundRoute",
    "OutboundRoute",
    "InboundCallRoute",
    "OutboundCallRoute",
    "RoutePlan",
    "InboundRoutePlan",
    "OutboundRoutePlan",
    "InboundCallRoutePlan",
    "OutboundCallRoutePlan",
    # Engine
    "RoutingEngine",
    "normalize_address",
    # Rules
    "DialPlan",
    "RouteRule",
    "load_dial_plan",
]
