"""Dialplan exception hierarchy.

Every failure carries a stable ``code`` alongside its message so the CLI and
HTTP surfaces can report it without string matching:
- TelcoExpressionError for malformed telco expressions (compile time)
- TransformError hierarchy for address transformation failures
- DialPlanConfigError for unreadable or invalid rules files
"""


class DialplanError(Exception):
    """Base exception for all dialplan errors."""

    code = "DIALPLAN_ERROR"

    def __init__(self, message: str, code: str = None):
        self.message = message
        if code is not None:
            self.code = code
        super().__init__(message)


# =============================================================================
# Pattern Exceptions
# =============================================================================

class TelcoExpressionError(DialplanError):
    """Telco expression could not be compiled.

    Raised before any matching is attempted. A pattern either compiles
    completely or not at all.
    """

    code = "PATTERN_INVALID"

    def __init__(self, message: str, pattern: str = "", position: int = None):
        self.pattern = pattern
        self.position = position
        if position is not None:
            message = f"{message} at position {position} in {pattern!r}"
        elif pattern:
            message = f"{message} in {pattern!r}"
        super().__init__(message)


# =============================================================================
# Transform Exceptions
# =============================================================================

class TransformError(DialplanError):
    """Base exception for address transformation failures."""

    code = "TRANSFORM_FAILED"


class NoMatchError(TransformError):
    """Input does not match the pattern, so no output can be produced."""

    code = "NO_MATCH"

    @classmethod
    def for_input(cls, input_value: str, pattern: str) -> "NoMatchError":
        """Factory for a non-matching input."""
        return cls(f"Input {input_value!r} does not match pattern {pattern!r}")


class CaptureLengthMismatchError(TransformError):
    """Template placeholders disagree with the captured groups.

    Covers both a ``$`` run whose length differs from its capture group
    (strict mode only) and a template that references more groups than
    the pattern produced.
    """

    code = "CAPTURE_LENGTH_MISMATCH"

    @classmethod
    def length(cls, group_index: int, expected: int, actual: str) -> "CaptureLengthMismatchError":
        """Factory for a placeholder run whose length differs from its group."""
        return cls(
            f"Placeholder run {group_index + 1} expects {expected} characters, "
            f"capture group has {len(actual)} ({actual!r})"
        )

    @classmethod
    def exhausted(cls, group_count: int) -> "CaptureLengthMismatchError":
        """Factory for a template that runs out of capture groups."""
        return cls(
            f"Template references more than the {group_count} capture group(s) "
            f"produced by the pattern"
        )


# =============================================================================
# Dial Plan Exceptions
# =============================================================================

class DialPlanConfigError(DialplanError):
    """Dial plan rules could not be loaded."""

    code = "DIALPLAN_INVALID"
