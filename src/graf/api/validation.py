"""
Field validators and the display name sanitizer.

Validators never raise: they return False and let the caller report which
field was rejected.
"""

import html
import re
from typing import Any

from graf.config import GrafConfig
from graf.graph.models import SEXES

# Largest identifier accepted for nodes and edges (INT64 columns)
MAX_INT = 2**63 - 1

_INT_PATTERN = re.compile(r"^\s*[+-]?(0|[1-9][0-9]*)\s*$")


def parse_int(value: Any) -> int:
    """Convert a value accepted by validate_bounded_int() to int."""
    if isinstance(value, int):
        return value
    return int(value.strip())


def validate_bounded_int(value: Any, minimum: int, maximum: int) -> bool:
    """Check that value is a base-10 integer within [minimum, maximum].

    Accepts ints (but not bools) and strings such as "42", "-7" or " +3 ".
    Rejects leading zeros, fractions, exponents and anything else.
    """
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        number = value
    elif isinstance(value, str) and _INT_PATTERN.match(value):
        number = int(value.strip())
    else:
        return False
    return minimum <= number <= maximum


def validate_sex(value: Any) -> bool:
    """Check that value is one of the codes in SEXES."""
    return isinstance(value, str) and value in SEXES


def validate_x(value: Any, config: GrafConfig) -> bool:
    return validate_bounded_int(value, config.min_x, config.max_x)


def validate_y(value: Any, config: GrafConfig) -> bool:
    return validate_bounded_int(value, config.min_y, config.max_y)


def validate_year(value: Any, config: GrafConfig) -> bool:
    return validate_bounded_int(value, config.min_year, config.max_year)


def validate_node_id(value: Any) -> bool:
    return validate_bounded_int(value, 0, MAX_INT)


def validate_edge_id(value: Any) -> bool:
    return validate_bounded_int(value, 0, MAX_INT)


def sanitize_name(raw: str) -> str:
    """Trim whitespace and escape HTML-significant characters, quotes included."""
    return html.escape(str(raw).strip(), quote=True)
