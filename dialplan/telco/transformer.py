"""Template-driven address transformer.

Rewrites a telephone number into a display format by replaying the capture
groups of a telco expression match through an output template:

    $$$   the next capture group (run length must equal the group length
          unless the transformer is lenient)
    Z     the rest capture, when the pattern ends in Z
    other characters are copied verbatim

Example:
    >>> AddressTransformer().transform("5551212", "NxxXXXX", "1 (212) $$$-$$$$")
    '1 (212) 555-1212'
"""

from typing import Optional

from dialplan import config
from dialplan.core.exceptions import CaptureLengthMismatchError, NoMatchError
from dialplan.telco.expression import MatchResult, compile_pattern

PLACEHOLDER = "$"
REST_MARKER = "Z"


def placeholder_runs(template: str) -> list[int]:
    """Lengths of the $-runs in a template, left to right."""
    runs = []
    count = 0
    for c in template + "\0":
        if c == PLACEHOLDER:
            count += 1
        elif count:
            runs.append(count)
            count = 0
    return runs


class AddressTransformer:
    """Formats numbers matched by a telco expression."""

    def __init__(self, strict: Optional[bool] = None):
        """Initialize transformer.

        Args:
            strict: Require each $-run to be exactly as long as its capture
                group. Defaults to DIALPLAN_TRANSFORM_STRICT.
        """
        self.strict = config.TRANSFORM_STRICT if strict is None else strict

    def transform(self, input_value: str, pattern: str, template: str) -> str:
        """Match ``input_value`` against ``pattern`` and render ``template``.

        Raises:
            TelcoExpressionError: If the pattern is malformed.
            NoMatchError: If the input does not match the pattern.
            CaptureLengthMismatchError: If the template placeholders do not
                line up with the captured groups.
        """
        compiled = compile_pattern(pattern)
        result = compiled.match(input_value)
        if not result.matched:
            raise NoMatchError.for_input(input_value, pattern)
        return self.render(result, template, has_rest=compiled.has_rest)

    def render(
        self,
        result: MatchResult,
        template: str,
        has_rest: Optional[bool] = None,
    ) -> str:
        """Render ``template`` from an existing successful match."""
        if has_rest is None:
            has_rest = result.rest is not None

        output = []
        group_index = 0
        i = 0
        n = len(template)

        while i < n:
            c = template[i]

            if c == PLACEHOLDER:
                j = i
                while j < n and template[j] == PLACEHOLDER:
                    j += 1
                run_length = j - i

                if group_index >= len(result.groups):
                    raise CaptureLengthMismatchError.exhausted(len(result.groups))
                group = result.groups[group_index]
                if self.strict and len(group) != run_length:
                    raise CaptureLengthMismatchError.length(group_index, run_length, group)

                output.append(group)
                group_index += 1
                i = j

            elif c == REST_MARKER and has_rest:
                output.append(result.rest or "")
                i += 1

            else:
                output.append(c)
                i += 1

        return "".join(output)


def transform(
    input_value: str,
    pattern: str,
    template: str,
    strict: Optional[bool] = None,
) -> str:
    """Module-level shortcut for AddressTransformer(strict).transform()."""
    return AddressTransformer(strict=strict).transform(input_value, pattern, template)
