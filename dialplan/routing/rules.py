"""Dial plan rules.

A dial plan is an ordered list of route rules loaded from JSON:

    {
      "routes": [
        {"id": "local", "direction": "outbound", "receiver_address": "NxxXXXX",
         "location": "gw1.example.com", "transform": "+1 202 $$$ $$$$"},
        {"id": "default", "direction": "inbound", "receiver_address": "*"}
      ]
    }

Every pattern and transform template is compiled while the file is loaded,
so a malformed rule fails at startup rather than on the first call.
"""

import json
import logging
from pathlib import Path
from typing import List, Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from dialplan import config
from dialplan.core.exceptions import DialPlanConfigError, TelcoExpressionError
from dialplan.routing.engine import RoutingEngine, is_wildcard_pattern
from dialplan.routing.models import (
    Direction,
    InboundRoute,
    OutboundRoute,
    Route,
    RoutePlan,
)
from dialplan.telco.expression import compile_pattern
from dialplan.telco.transformer import placeholder_runs

log = logging.getLogger(__name__)


def _check_pattern(value: str) -> str:
    if not is_wildcard_pattern(value):
        try:
            compile_pattern(value)
        except TelcoExpressionError as e:
            raise ValueError(e.message) from e
    return value


class RouteRule(BaseModel):
    """A single dial plan rule."""
    id: str
    organization_id: str = ""
    direction: Direction = Direction.INBOUND
    protocol: str = "SIP"
    location: str = ""
    sender_address: str = "*"
    receiver_address: str
    transform: Optional[str] = None  # Output template (outbound only)

    @field_validator("receiver_address", "sender_address")
    @classmethod
    def validate_pattern(cls, value: str) -> str:
        return _check_pattern(value)

    @model_validator(mode="after")
    def validate_transform(self) -> "RouteRule":
        if self.transform is None:
            return self
        if self.direction is not Direction.OUTBOUND:
            raise ValueError("transform is only supported on outbound routes")
        if is_wildcard_pattern(self.receiver_address):
            raise ValueError("transform requires a telco expression receiver_address")
        compiled = compile_pattern(self.receiver_address)
        runs = placeholder_runs(self.transform)
        if len(runs) > compiled.group_count:
            raise ValueError(
                f"transform references more than the {compiled.group_count} capture group(s) "
                f"of {self.receiver_address!r}"
            )
        if config.TRANSFORM_STRICT:
            for index, (run, length) in enumerate(zip(runs, compiled.group_lengths)):
                if length is not None and run != length:
                    raise ValueError(
                        f"transform $-run {index} has length {run} but capture group "
                        f"{index} of {self.receiver_address!r} is {length} character(s)"
                    )
        return self

    def to_route(self) -> Route:
        """Convert to the routing engine's route model."""
        common = dict(
            id=self.id,
            organization_id=self.organization_id,
            protocol=self.protocol,
            location=self.location,
            sender_address=self.sender_address,
            receiver_address=self.receiver_address,
        )
        if self.direction is Direction.OUTBOUND:
            return OutboundRoute(
                matched_pattern=self.receiver_address,
                transformer=self.transform,
                **common,
            )
        return InboundRoute(matched_endpoint=self.location, **common)


class DialPlanDocument(BaseModel):
    """Top-level rules file structure."""
    routes: List[RouteRule] = Field(default_factory=list)


class DialPlan:
    """Ordered set of routes; the first applicable route wins."""

    def __init__(self, routes: List[Route], engine: Optional[RoutingEngine] = None):
        self.routes = list(routes)
        self.engine = engine or RoutingEngine()

    @classmethod
    def from_document(cls, data: Union[dict, DialPlanDocument], engine: Optional[RoutingEngine] = None) -> "DialPlan":
        """Build a dial plan from a parsed rules document.

        Raises:
            DialPlanConfigError: If any rule is invalid.
        """
        if isinstance(data, DialPlanDocument):
            document = data
        else:
            try:
                document = DialPlanDocument.model_validate(data)
            except ValidationError as e:
                raise DialPlanConfigError(f"Invalid dial plan: {e}") from e
        return cls([rule.to_route() for rule in document.routes], engine=engine)

    def __len__(self) -> int:
        return len(self.routes)

    def route(
        self,
        destination_address: str,
        sender_address: Optional[str] = None,
        direction: Optional[Direction] = None,
    ) -> Optional[RoutePlan]:
        """Return the plan of the first route that applies, or None."""
        for route in self.routes:
            if direction is not None and route.direction is not direction:
                continue
            plan = self.engine.route(route, destination_address, sender_address)
            if plan is not None:
                return plan
        log.info(f"No route for destination {destination_address}")
        return None


def load_dial_plan(path: Union[str, Path], engine: Optional[RoutingEngine] = None) -> DialPlan:
    """Load and compile a dial plan rules file.

    Raises:
        DialPlanConfigError: If the file cannot be read, is not JSON, or
            contains an invalid rule.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise DialPlanConfigError(f"Cannot read dial plan {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise DialPlanConfigError(f"Dial plan {path} is not valid JSON: {e}") from e

    plan = DialPlan.from_document(data, engine=engine)
    log.info(f"Loaded dial plan {path} with {len(plan)} route(s)")
    return plan
