"""Telco expression compiler and matcher.

A telco expression classifies the character positions of a telephone number:

    N       one digit 2-9
    X, x    one digit 0-9
    Z       one digit 1-9, or the rest of the input when it is the last token
    .       any single character
    [a|b]   one of the listed alternatives; N, X, x, Z and . keep their
            class meaning inside an alternative, other characters are literal
    + ? *   one-or-more, zero-or-one, zero-or-more of the preceding atom

Every other character matches itself. Examples:
- "NxxXXXX" matches a seven digit local number such as "5551212"
- "1800XXXXXXX" matches an eleven digit toll-free number
- "NxxXXXXZ" matches a local number followed by any extension digits
- "[(554)|(555)]xxxx" matches "5541212" and "5551212"

Digit-class atoms capture what they consume. Adjacent atoms with the same
token letter share one capture group; a lowercase "x" also extends the group
opened by the digit class right before it, so "NxxXXXX" captures "Nxx" and
"XXXX" as two groups. A trailing "Z" produces a separate rest capture.
"""

import functools
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional, Set, Tuple

from dialplan import config
from dialplan.core.exceptions import TelcoExpressionError

DIGITS_ANY = frozenset("0123456789")
DIGITS_NON_ZERO = frozenset("123456789")
DIGITS_RESTRICTIVE = frozenset("23456789")

QUANTIFIERS = frozenset("+?*")

# Stripped from alternation alternatives before comparison: "[(554)|(555)]"
# accepts the bare digits "554" and "555"
ALTERNATION_FORMATTING = "()"


class AtomKind(str, Enum):
    """Kind of a compiled pattern atom."""
    DIGIT_RESTRICTIVE = "digit_restrictive"  # N
    DIGIT_ANY = "digit_any"                  # X, x
    DIGIT_NON_ZERO = "digit_non_zero"        # Z (not last)
    WILDCARD = "wildcard"                    # .
    LITERAL = "literal"
    REST = "rest"                            # Z (last)
    ALTERNATION = "alternation"              # [a|b]


DIGIT_CLASSES = {
    AtomKind.DIGIT_RESTRICTIVE: DIGITS_RESTRICTIVE,
    AtomKind.DIGIT_ANY: DIGITS_ANY,
    AtomKind.DIGIT_NON_ZERO: DIGITS_NON_ZERO,
}

CLASS_TOKENS = {
    "N": AtomKind.DIGIT_RESTRICTIVE,
    "X": AtomKind.DIGIT_ANY,
    "x": AtomKind.DIGIT_ANY,
    "Z": AtomKind.DIGIT_NON_ZERO,
}

# quantifier -> (minimum, maximum); None means unbounded
REPEAT_BOUNDS = {
    None: (1, 1),
    "+": (1, None),
    "?": (0, 1),
    "*": (0, None),
}


@dataclass(frozen=True)
class Atom:
    """A compiled unit of a telco expression."""

    kind: AtomKind
    token: str
    position: int
    quantifier: Optional[str] = None
    alternatives: Tuple[Tuple["Atom", ...], ...] = ()  # one atom per character
    group: Optional[int] = None  # capture group index, None if not capturing

    @property
    def is_capturing(self) -> bool:
        return self.kind in DIGIT_CLASSES

    @property
    def bounds(self) -> Tuple[int, Optional[int]]:
        return REPEAT_BOUNDS[self.quantifier]

    def accepts(self, ch: str) -> bool:
        """Check whether a single input character satisfies this atom."""
        if self.kind is AtomKind.WILDCARD:
            return True
        if self.kind is AtomKind.LITERAL:
            return ch == self.token
        charset = DIGIT_CLASSES.get(self.kind)
        return charset is not None and ch in charset


@dataclass(frozen=True)
class MatchResult:
    """Outcome of matching an input against a compiled pattern.

    ``segments`` holds the text consumed by each atom in pattern order, so
    for a successful match ``"".join(segments)`` is the whole input.
    """

    matched: bool
    groups: Tuple[str, ...] = ()
    rest: Optional[str] = None
    segments: Tuple[str, ...] = ()

    @property
    def captures(self) -> Tuple[str, ...]:
        """Positional groups followed by the rest capture, if any."""
        if self.rest is None:
            return self.groups
        return self.groups + (self.rest,)

    def __bool__(self) -> bool:
        return self.matched


NO_MATCH = MatchResult(matched=False)


@dataclass(frozen=True)
class CompiledPattern:
    """Immutable compiled telco expression, safe to share between threads."""

    pattern: str
    atoms: Tuple[Atom, ...]
    group_count: int

    @property
    def has_rest(self) -> bool:
        return bool(self.atoms) and self.atoms[-1].kind is AtomKind.REST

    @property
    def group_lengths(self) -> Tuple[Optional[int], ...]:
        """Length of each capture group; None where a quantifier makes it vary."""
        lengths: List[Optional[int]] = [0] * self.group_count
        for atom in self.atoms:
            if atom.group is None or lengths[atom.group] is None:
                continue
            if atom.quantifier is None:
                lengths[atom.group] += 1
            else:
                lengths[atom.group] = None
        return tuple(lengths)

    def match(self, text: str) -> MatchResult:
        """Match the whole of ``text`` against this pattern."""
        spans: List[Optional[Tuple[int, int]]] = [None] * len(self.atoms)
        if not _match_from(self.atoms, text, 0, 0, spans, set()):
            return NO_MATCH

        segments = tuple(text[start:end] for start, end in spans)
        groups = [""] * self.group_count
        rest = None
        for atom, segment in zip(self.atoms, segments):
            if atom.group is not None:
                groups[atom.group] += segment
            elif atom.kind is AtomKind.REST:
                rest = segment
        return MatchResult(
            matched=True,
            groups=tuple(groups),
            rest=rest,
            segments=segments,
        )


def _match_from(
    atoms: Tuple[Atom, ...],
    text: str,
    index: int,
    pos: int,
    spans: List[Optional[Tuple[int, int]]],
    failed: Set[Tuple[int, int]],
) -> bool:
    """Backtracking matcher; records the span each atom consumed in ``spans``.

    Whether the atoms from ``index`` on can consume ``text[pos:]`` depends on
    nothing else, so every ``(index, pos)`` state that failed is kept in
    ``failed`` and never explored twice. That bounds the work by
    atoms x positions x positions. Recursion depth is bounded by the number
    of atoms.
    """
    if index == len(atoms):
        return pos == len(text)

    state = (index, pos)
    if state in failed:
        return False

    atom = atoms[index]

    if atom.kind is AtomKind.REST:
        spans[index] = (pos, len(text))
        return True

    if atom.kind is AtomKind.ALTERNATION:
        for alternative in atom.alternatives:
            end = pos + len(alternative)
            if end > len(text):
                continue
            if not all(a.accepts(ch) for a, ch in zip(alternative, text[pos:end])):
                continue
            spans[index] = (pos, end)
            if _match_from(atoms, text, index + 1, end, spans, failed):
                return True
        failed.add(state)
        return False

    low, high = atom.bounds
    available = len(text) - pos
    limit = available if high is None else min(high, available)

    # Greedy: take as many as possible, then give back one at a time
    count = 0
    while count < limit and atom.accepts(text[pos + count]):
        count += 1

    for taken in range(count, low - 1, -1):
        spans[index] = (pos, pos + taken)
        if _match_from(atoms, text, index + 1, pos + taken, spans, failed):
            return True
    failed.add(state)
    return False


def _alternative_atom(c: str, position: int) -> Atom:
    if c in CLASS_TOKENS:
        return Atom(kind=CLASS_TOKENS[c], token=c, position=position)
    if c == ".":
        return Atom(kind=AtomKind.WILDCARD, token=c, position=position)
    return Atom(kind=AtomKind.LITERAL, token=c, position=position)


def _split_alternatives(
    body: str, pattern: str, position: int
) -> Tuple[Tuple[Atom, ...], ...]:
    """Compile an alternation body into one atom sequence per alternative.

    Formatting characters are dropped; class letters and '.' inside an
    alternative match as they do outside a group.
    """
    alternatives = []
    offset = position + 1
    for alternative in body.split("|"):
        alternatives.append(tuple(
            _alternative_atom(c, offset + k)
            for k, c in enumerate(alternative)
            if c not in ALTERNATION_FORMATTING
        ))
        offset += len(alternative) + 1

    if len(alternatives) < 2:
        raise TelcoExpressionError(
            "Alternation group needs at least two alternatives", pattern, position
        )
    if not all(alternatives):
        raise TelcoExpressionError(
            "Empty alternative in alternation group", pattern, position
        )
    return tuple(alternatives)


def _tokenize(pattern: str) -> List[Atom]:
    atoms: List[Atom] = []
    quantifiers = 0
    i = 0
    n = len(pattern)

    while i < n:
        c = pattern[i]

        if c in QUANTIFIERS:
            if not atoms:
                raise TelcoExpressionError(f"Quantifier {c!r} has nothing to repeat", pattern, i)
            previous = atoms[-1]
            if previous.kind is AtomKind.ALTERNATION:
                raise TelcoExpressionError("Alternation group cannot be quantified", pattern, i)
            if previous.quantifier is not None:
                raise TelcoExpressionError(
                    f"Quantifier {c!r} follows another quantifier", pattern, i
                )
            quantifiers += 1
            if quantifiers > config.MAX_QUANTIFIERS:
                raise TelcoExpressionError(
                    f"More than {config.MAX_QUANTIFIERS} quantifiers", pattern
                )
            atoms[-1] = replace(previous, quantifier=c)
            i += 1

        elif c == "[":
            end = pattern.find("]", i + 1)
            if end == -1:
                raise TelcoExpressionError("Unclosed alternation group", pattern, i)
            body = pattern[i + 1:end]
            nested = body.find("[")
            if nested != -1:
                raise TelcoExpressionError("Nested alternation group", pattern, i + 1 + nested)
            atoms.append(Atom(
                kind=AtomKind.ALTERNATION,
                token=c,
                position=i,
                alternatives=_split_alternatives(body, pattern, i),
            ))
            i = end + 1

        elif c == "]":
            raise TelcoExpressionError("Unbalanced ']'", pattern, i)

        elif c == "|":
            raise TelcoExpressionError("'|' outside an alternation group", pattern, i)

        elif c in CLASS_TOKENS:
            atoms.append(Atom(kind=CLASS_TOKENS[c], token=c, position=i))
            i += 1

        elif c == ".":
            atoms.append(Atom(kind=AtomKind.WILDCARD, token=c, position=i))
            i += 1

        else:
            atoms.append(Atom(kind=AtomKind.LITERAL, token=c, position=i))
            i += 1

    # An unquantified Z as the final token captures the rest of the input
    last = atoms[-1]
    if last.token == "Z" and last.kind is AtomKind.DIGIT_NON_ZERO and last.quantifier is None:
        atoms[-1] = replace(last, kind=AtomKind.REST)

    return atoms


def _assign_groups(atoms: List[Atom]) -> Tuple[Tuple[Atom, ...], int]:
    """Number the capture groups of the capturing atoms, left to right."""
    result = []
    group = -1
    previous = None
    for atom in atoms:
        if atom.is_capturing:
            continues = (
                previous is not None
                and previous.is_capturing
                and (atom.token == previous.token or atom.token == "x")
            )
            if not continues:
                group += 1
            atom = replace(atom, group=group)
        result.append(atom)
        previous = atom
    return tuple(result), group + 1


@functools.lru_cache(maxsize=config.PATTERN_CACHE_SIZE)
def compile_pattern(pattern: str) -> CompiledPattern:
    """Compile a telco expression.

    Args:
        pattern: The telco expression source.

    Returns:
        The compiled pattern. Results are memoised per pattern string.

    Raises:
        TelcoExpressionError: If the pattern is malformed or exceeds the
            configured length/quantifier limits.
    """
    if not pattern:
        raise TelcoExpressionError("Empty pattern")
    if len(pattern) > config.MAX_PATTERN_LENGTH:
        raise TelcoExpressionError(
            f"Pattern longer than {config.MAX_PATTERN_LENGTH} characters", pattern
        )

    atoms, group_count = _assign_groups(_tokenize(pattern))
    return CompiledPattern(pattern=pattern, atoms=atoms, group_count=group_count)


class TelcoExpressionParser:
    """Matches telephone numbers against telco expressions.

    Stateless; a single instance may be shared freely.
    """

    def compile(self, pattern: str) -> CompiledPattern:
        return compile_pattern(pattern)

    def match(self, pattern: str, input_value: str) -> bool:
        """Check whether ``input_value`` matches ``pattern``.

        Raises:
            TelcoExpressionError: If the pattern is malformed. A
                non-matching input is never an error.
        """
        return compile_pattern(pattern).match(input_value).matched

    def match_result(self, pattern: str, input_value: str) -> MatchResult:
        """Match and return the captured groups."""
        return compile_pattern(pattern).match(input_value)


def match(pattern: str, input_value: str) -> bool:
    """Module-level shortcut for TelcoExpressionParser().match()."""
    return compile_pattern(pattern).match(input_value).matched
