"""Configuration for dialplan.

Environment-based configuration with sensible defaults. Values are read once
at import time.
"""

import os
from pathlib import Path

# =============================================================================
# Telco expressions
# =============================================================================

# Upper bound on pattern length and quantifier count; keeps compile work and
# the matcher state space small for patterns from rule files and clients
MAX_PATTERN_LENGTH = int(os.getenv("DIALPLAN_MAX_PATTERN_LENGTH", "256"))
MAX_QUANTIFIERS = int(os.getenv("DIALPLAN_MAX_QUANTIFIERS", "32"))

# Compiled pattern cache (LRU)
PATTERN_CACHE_SIZE = int(os.getenv("DIALPLAN_PATTERN_CACHE_SIZE", "512"))

# =============================================================================
# Address transformation
# =============================================================================

# True: a $-run must be exactly as long as its capture group
# False: the whole capture group is substituted regardless of run length
TRANSFORM_STRICT = os.getenv("DIALPLAN_TRANSFORM_STRICT", "true").lower() == "true"

# =============================================================================
# Routing
# =============================================================================

# Country code prepended to national (10-digit) numbers during normalization
DEFAULT_COUNTRY_CODE = os.getenv("DIALPLAN_DEFAULT_COUNTRY_CODE", "1")

# NANP toll-free area codes
TOLL_FREE_AREA_CODES: frozenset[str] = frozenset({
    "800", "888", "877", "866", "855", "844", "833",
})

# Dial plan rules file served by the HTTP service
RULES_FILE = os.getenv("DIALPLAN_RULES_FILE", "")

# =============================================================================
# Logging
# =============================================================================

LOG_LEVEL = os.getenv("DIALPLAN_LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("DIALPLAN_LOG_FILE", "")


def validate_config() -> list[str]:
    """Validate configuration and return list of issues."""
    issues = []

    if MAX_PATTERN_LENGTH < 1:
        issues.append(f"DIALPLAN_MAX_PATTERN_LENGTH must be positive: {MAX_PATTERN_LENGTH}")
    if MAX_QUANTIFIERS < 0:
        issues.append(f"DIALPLAN_MAX_QUANTIFIERS must not be negative: {MAX_QUANTIFIERS}")
    if PATTERN_CACHE_SIZE < 0:
        issues.append(f"DIALPLAN_PATTERN_CACHE_SIZE must not be negative: {PATTERN_CACHE_SIZE}")

    if not DEFAULT_COUNTRY_CODE.isdigit():
        issues.append(f"Invalid DIALPLAN_DEFAULT_COUNTRY_CODE: {DEFAULT_COUNTRY_CODE}")

    if RULES_FILE and not Path(RULES_FILE).exists():
        issues.append(f"Dial plan rules file not found: {RULES_FILE}")

    if LOG_LEVEL.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        issues.append(f"Invalid DIALPLAN_LOG_LEVEL: {LOG_LEVEL}")

    return issues
