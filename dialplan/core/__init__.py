# Dialplan Core - Shared exceptions and logging

from dialplan.core.exceptions import (
    DialplanError,
    TelcoExpressionError,
    TransformError,
    NoMatchError,
    CaptureLengthMismatchError,
    DialPlanConfigError,
)
from dialplan.core.logging import configure_logging, JsonFormatter

__all__ = [
    "DialplanError",
    "TelcoExpressionError",
    "TransformError",
    "NoMatchError",
    "CaptureLengthMismatchError",
    "DialPlanConfigError",
    "configure_logging",
    "JsonFormatter",
]
