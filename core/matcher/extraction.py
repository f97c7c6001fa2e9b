#!/usr/bin/env python3
"""
Free-text numeric extraction.

Remarks and preference values are typed by hand, so malformed text is normal
input. Every helper here returns NO_MATCH instead of raising.
"""
import re
import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Pattern

logger = logging.getLogger(__name__)

_NUMBER = r'(\d+(?:\.\d+)?)'
_TSUBO = r'\s*(?:坪|tsubo)'
_RANGE_SEP = r'\s*[-~〜～–]\s*'


@dataclass(frozen=True)
class Extraction:
    """Result of a pattern search: matched with a value, or NO_MATCH."""
    matched: bool
    value: Optional[float] = None
    pattern: Optional[str] = None


NO_MATCH = Extraction(matched=False)


# Range first so "30-50坪" reads as 40 rather than as the trailing "50坪";
# the plain form also covers "50坪以上" / "50 tsubo or more".
TSUBO_PATTERNS: Sequence[Pattern] = (
    re.compile(_NUMBER + _RANGE_SEP + _NUMBER + _TSUBO, re.IGNORECASE),
    re.compile(_NUMBER + _TSUBO + r'\s*(?:以上|or more)', re.IGNORECASE),
    re.compile(_NUMBER + _TSUBO, re.IGNORECASE),
)

WALK_MINUTES_PATTERNS: Sequence[Pattern] = (
    re.compile(r'徒歩\s*(\d+)\s*分以内'),
    re.compile(r'walk\s*(?:≤|<=|within|under)\s*(\d+)\s*min', re.IGNORECASE),
    re.compile(r'within\s+(\d+)\s*min(?:ute)?s?\s+(?:walk|on\s+foot)', re.IGNORECASE),
)

BUILT_WITHIN_PATTERNS: Sequence[Pattern] = (
    re.compile(r'築\s*(\d+)\s*年以内'),
    re.compile(r'built\s+within\s+(\d+)\s*(?:years?|yrs?)', re.IGNORECASE),
)

NEW_BUILD_VALUES = frozenset({'新築', 'new-build', 'new build', 'newly built'})

MIN_YIELD_PATTERNS: Sequence[Pattern] = (
    re.compile(r'利回り\s*' + _NUMBER + r'\s*%\s*以上'),
    re.compile(r'yield\s*(?:≥|>=)\s*' + _NUMBER + r'\s*%', re.IGNORECASE),
)

_SQM = r'\s*(?:㎡|m2|m²|sqm)'

MIN_LAND_AREA_PATTERNS: Sequence[Pattern] = (
    re.compile(r'土地面積\s*' + _NUMBER + r'\s*㎡以上'),
    re.compile(r'land\s+area\s*(?:≥|>=)\s*' + _NUMBER + _SQM, re.IGNORECASE),
)

MIN_BUILDING_AREA_PATTERNS: Sequence[Pattern] = (
    re.compile(r'建物面積\s*' + _NUMBER + r'\s*㎡以上'),
    re.compile(r'building\s+area\s*(?:≥|>=)\s*' + _NUMBER + _SQM, re.IGNORECASE),
)


def extract_quantity(text: Optional[str], patterns: Sequence[Pattern]) -> Extraction:
    """
    Return the quantity captured by the first pattern that matches.

    A pattern with two numeric groups is a range and yields their mean.
    Missing groups or unparseable numbers fall through to the next pattern.
    """
    if not text:
        return NO_MATCH

    for pattern in patterns:
        m = pattern.search(text)
        if not m:
            continue

        groups = [g for g in m.groups() if g is not None]
        if not groups:
            continue
        try:
            numbers = [float(g) for g in groups]
        except ValueError:
            logger.debug(f"Unparseable quantity in {text!r} for pattern {pattern.pattern}")
            continue

        value = sum(numbers) / len(numbers)
        return Extraction(matched=True, value=value, pattern=pattern.pattern)

    return NO_MATCH


def extract_tsubo_requirement(*texts: Optional[str]) -> Extraction:
    """First tsubo requirement found across the given texts, in order."""
    for text in texts:
        result = extract_quantity(text, TSUBO_PATTERNS)
        if result.matched and result.value:
            return result
    return NO_MATCH


def is_new_build(text: Optional[str]) -> bool:
    if not text:
        return False
    return text.strip().lower() in NEW_BUILD_VALUES
