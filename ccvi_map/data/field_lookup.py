"""
Field Lookup Module

Ordered candidate property names for each logical field, and helpers that
return the first present (and parseable) value among them.
"""

import re
from typing import Any, Callable, Mapping, Optional, Sequence, Tuple, TypeVar

T = TypeVar('T')

ID_KEYS = ('id', 'ID', 'Id')

NAME_KEYS = ('name', 'NAME', 'Name', 'DISTRICT', 'TEHSIL', 'UNION_COUNCIL')

# Plain names first, then upper-case variants
SCORE_KEYS = (
    'vulnerability_score', 'ccvi_score', 'vulnerability', 'score',
    'exposure', 'sensitivity', 'adaptive_capacity',
    'VULNERABILITY_SCORE', 'CCVI_SCORE', 'VULNERABILITY', 'SCORE',
    'EXPOSURE', 'SENSITIVITY', 'ADAPTIVE_CAPACITY',
)

COMPONENT_KEYS = {
    'exposure': ('exposure', 'EXPOSURE'),
    'sensitivity': ('sensitivity', 'SENSITIVITY'),
    'adaptive_capacity': ('adaptive_capacity', 'ADAPTIVE_CAPACITY'),
}

POPULATION_KEYS = ('population', 'POPULATION')

AREA_KEYS = ('area', 'AREA')

# Leading decimal number of a string such as "75%" or " 0.4 (est.)"
LEADING_NUMBER = re.compile(r'\s*[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?')


def first_present(
    properties: Mapping[str, Any],
    keys: Sequence[str]
) -> Optional[Tuple[str, Any]]:
    """
    Find the first key that is present with a non-null value.

    Parameters
    ----------
    properties : Mapping[str, Any]
        Raw feature properties
    keys : Sequence[str]
        Candidate keys in priority order

    Returns
    -------
    Tuple[str, Any] or None
        (key, value) of the first match, None if no candidate is present
    """
    for key in keys:
        value = properties.get(key)
        if value is not None:
            return key, value
    return None


def first_parsed(
    properties: Mapping[str, Any],
    keys: Sequence[str],
    parse: Callable[[Any], Optional[T]]
) -> Optional[Tuple[str, T]]:
    """
    Find the first present key whose value ``parse`` accepts.

    ``parse`` returns None for values it cannot interpret; those keys are
    skipped and the scan moves on to the next candidate.
    """
    for key in keys:
        value = properties.get(key)
        if value is None:
            continue
        parsed = parse(value)
        if parsed is not None:
            return key, parsed
    return None


def parse_float(value: Any) -> Optional[float]:
    """
    Parse a number or a string starting with one, None if not a finite number.

    Strings are read up to the end of their leading number, so ``"75%"``
    parses as 75.0 while ``"n/a"`` is rejected.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        match = LEADING_NUMBER.match(value)
        if match is None:
            return None
        value = match.group()
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if number != number or number in (float('inf'), float('-inf')):
        return None
    return number


def parse_non_negative_int(value: Any) -> Optional[int]:
    number = parse_float(value)
    if number is None or number < 0:
        return None
    return int(number)


def parse_non_negative_float(value: Any) -> Optional[float]:
    number = parse_float(value)
    if number is None or number < 0:
        return None
    return number
