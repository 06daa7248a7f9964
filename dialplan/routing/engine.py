"""Dial plan routing engine.

Decides whether a route applies to a destination number and, if so, produces
a route plan:
- Destination normalized to E.164 and matched against the route's receiver
  pattern (telco expression, "*" or a digit prefix followed by "*")
- Number classified as local, toll-free, long distance or international
- Sender checked against the route's sender pattern
- Outbound routes with a transform template rewrite the destination
"""

import logging
from typing import Optional, Union

from dialplan import config
from dialplan.routing.models import (
    INTERNATIONAL,
    LOCAL,
    LONG_DISTANCE,
    TOLL_FREE,
    UNKNOWN,
    InboundCallRoute,
    InboundCallRoutePlan,
    InboundRoutePlan,
    OutboundCallRoute,
    OutboundCallRoutePlan,
    OutboundRoute,
    OutboundRoutePlan,
    Route,
    RouteClassification,
    RoutePlan,
)
from dialplan.telco.expression import CLASS_TOKENS, TelcoExpressionParser
from dialplan.telco.transformer import AddressTransformer

log = logging.getLogger(__name__)

WILDCARD = "*"
FORMATTING_CHARS = "-() "


def normalize_address(address: str, country_code: str = None) -> str:
    """Normalize a dialled address towards E.164.

    Formatting characters are removed. National numbers (10 digits) get the
    default country code; numbers that already start with it get a '+'.

    Args:
        address: Raw address, e.g. "(202) 555-1234" or "+1 202 555 1234".
        country_code: Country code for national numbers. Defaults to
            DIALPLAN_DEFAULT_COUNTRY_CODE.

    Returns:
        Normalized address; other lengths are returned without a prefix.
    """
    country_code = country_code or config.DEFAULT_COUNTRY_CODE
    normalized = address.translate({ord(c): None for c in FORMATTING_CHARS})

    if not normalized.startswith("+"):
        if len(normalized) == 10:
            normalized = f"+{country_code}{normalized}"
        elif len(normalized) == 10 + len(country_code) and normalized.startswith(country_code):
            normalized = f"+{normalized}"

    return normalized


def is_wildcard_pattern(pattern: str) -> bool:
    """Check for "*" or a digit prefix followed by "*"."""
    return pattern == WILDCARD or (pattern.endswith(WILDCARD) and pattern[:-1].isdigit())


def count_leading_digits(pattern: str) -> int:
    """Count the literal digits in the leading digit/class run of a pattern."""
    count = 0
    for c in pattern:
        if c.isdigit():
            count += 1
        elif c not in CLASS_TOKENS and c not in ("n", "z"):
            break
    return count


class RoutingEngine:
    """Matches destinations against routes and builds route plans."""

    def __init__(
        self,
        parser: Optional[TelcoExpressionParser] = None,
        transformer: Optional[AddressTransformer] = None,
        country_code: str = None,
    ):
        self._parser = parser or TelcoExpressionParser()
        self._transformer = transformer or AddressTransformer()
        self._country_code = country_code or config.DEFAULT_COUNTRY_CODE

    def normalize(self, address: str) -> str:
        return normalize_address(address, self._country_code)

    def matches(self, pattern: str, digits: str) -> bool:
        """Match digits against a route pattern.

        Raises:
            TelcoExpressionError: If the pattern is a malformed telco expression.
        """
        if pattern == WILDCARD:
            return True
        if is_wildcard_pattern(pattern):
            return digits.startswith(pattern[:-1])
        return self._parser.match(pattern, digits)

    def classify(self, address: str, pattern: str) -> RouteClassification:
        """Classify a normalized address."""
        digits = address.replace("+", "")
        national = len(digits) == 10 + len(self._country_code) and digits.startswith(self._country_code)

        if len(digits) in (7, 10):
            return LOCAL

        if national and digits[len(self._country_code):][:3] in config.TOLL_FREE_AREA_CODES:
            return TOLL_FREE

        # Routes pinned to an area code (e.g. 1202XXXXXXX) are local to it
        if national and count_leading_digits(pattern) >= 4:
            return LOCAL

        if national:
            return LONG_DISTANCE

        if not digits.startswith(self._country_code) and len(digits) >= 10:
            return INTERNATIONAL

        return UNKNOWN

    def is_authorized(self, route: Route, sender_address: Optional[str]) -> bool:
        """Check the sender against the route's sender pattern."""
        if not route.sender_address or route.sender_address == WILDCARD:
            return True
        if not sender_address:
            return False
        sender_digits = self.normalize(sender_address).replace("+", "")
        return self.matches(route.sender_address, sender_digits)

    def route(
        self,
        route: Route,
        destination_address: str,
        sender_address: Optional[str] = None,
    ) -> Optional[RoutePlan]:
        """Build a route plan for ``destination_address``.

        Returns:
            An InboundRoutePlan or OutboundRoutePlan, or None when the route
            does not apply to the destination.

        Raises:
            TelcoExpressionError: If a route pattern is malformed.
            CaptureLengthMismatchError: If an outbound transform template
                does not fit the route pattern.
        """
        normalized = self.normalize(destination_address)
        digits = normalized.replace("+", "")

        if isinstance(route, OutboundRoute):
            pattern = route.pattern
        else:
            pattern = route.receiver_address

        if not self.matches(pattern, digits):
            log.debug(
                f"Route {route.id} does not match destination {normalized}",
                extra={"route_id": route.id, "pattern": pattern, "destination": normalized},
            )
            return None

        classification = self.classify(normalized, pattern)
        authorized = self.is_authorized(route, sender_address)

        if isinstance(route, OutboundRoute):
            transformed = normalized
            if route.transformer:
                if is_wildcard_pattern(pattern):
                    log.warning(
                        f"Route {route.id} has a transform but wildcard pattern {pattern!r}; "
                        f"transform ignored",
                        extra={"route_id": route.id, "pattern": pattern},
                    )
                else:
                    transformed = self._transformer.transform(digits, pattern, route.transformer)
            plan = OutboundRoutePlan(
                classification=classification,
                is_authorized=authorized,
                destination_endpoint=route.receiver_address,
                transformed_address=transformed,
                destination_host=route.location,
                matched_pattern=pattern,
            )
        else:
            endpoint = getattr(route, "matched_endpoint", "") or route.receiver_address
            plan = InboundRoutePlan(
                classification=classification,
                is_authorized=authorized,
                destination_endpoint=endpoint,
                transformed_address=normalized,
                destination_host=route.location,
                matched_endpoint=endpoint,
            )

        log.info(
            f"Route {route.id} matched {normalized} "
            f"classification={classification.code} authorized={authorized}",
            extra={
                "route_id": route.id,
                "pattern": pattern,
                "destination": normalized,
                "classification": classification.code,
            },
        )
        return plan

    def route_call(
        self,
        route: Union[InboundCallRoute, OutboundCallRoute],
    ) -> Optional[RoutePlan]:
        """Route a call using the numbers carried by the call route itself."""
        if isinstance(route, OutboundCallRoute):
            plan = self.route(route, route.destination_number, route.caller_id)
            if plan is None:
                return None
            return OutboundCallRoutePlan(
                id=plan.id,
                classification=plan.classification,
                is_authorized=plan.is_authorized,
                destination_endpoint=plan.destination_endpoint,
                transformed_address=plan.transformed_address,
                destination_host=plan.destination_host,
                matched_pattern=plan.matched_pattern,
                normalized_caller_id=self.normalize(route.caller_id),
                normalized_destination=self.normalize(route.destination_number),
                assigned_endpoint=route.location or None,
            )

        plan = self.route(route, route.called_number, route.caller_id)
        if plan is None:
            return None
        return InboundCallRoutePlan(
            id=plan.id,
            classification=plan.classification,
            is_authorized=plan.is_authorized,
            destination_endpoint=plan.destination_endpoint,
            transformed_address=plan.transformed_address,
            destination_host=plan.destination_host,
            matched_endpoint=plan.matched_endpoint,
            normalized_caller_id=self.normalize(route.caller_id),
            normalized_called_number=self.normalize(route.called_number),
            assigned_endpoint=route.location or plan.matched_endpoint,
        )
