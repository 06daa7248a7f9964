# Dialplan Telco - Telco expression matching and address transformation

from dialplan.telco.expression import (
    Atom,
    AtomKind,
    CompiledPattern,
    MatchResult,
    TelcoExpressionParser,
    compile_pattern,
    match,
)
from dialplan.telco.transformer import AddressTransformer, transform

__all__ = [
    "Atom",
    "AtomKind",
    "CompiledPattern",
    "MatchResult",
    "TelcoExpressionParser",
    "compile_pattern",
    "match",
    "AddressTransformer",
    "transform",
]
