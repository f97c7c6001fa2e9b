#!/usr/bin/env python3
"""
Preference Matcher - Evaluate structured preference rules against a listing.

Each PreferenceType has exactly one check function. The table is verified
against the enum at import time, so adding a type without a check fails fast.
The aggregate "other conditions" score is the priority-weighted fraction of
rules a listing satisfies.
"""
from typing import Callable, Dict, Iterable, Optional
import logging

from core.matcher.extraction import (
    extract_quantity,
    is_new_build,
    WALK_MINUTES_PATTERNS,
    BUILT_WITHIN_PATTERNS,
    MIN_YIELD_PATTERNS,
    MIN_LAND_AREA_PATTERNS,
    MIN_BUILDING_AREA_PATTERNS,
)
from core.matcher.models import PreferenceType, Priority
from core.utils import Clock, utc_now, to_float

logger = logging.getLogger(__name__)

NO_RULES_SCORE = 50.0


def _contains(haystack: Optional[str], needle: Optional[str]) -> bool:
    if not haystack or not needle:
        return False
    return needle in haystack


def _match_area(value: str, listing, today) -> bool:
    return (
        _contains(listing.full_address, value)
        or _contains(listing.region, value)
        or _contains(listing.locality, value)
    )


def _match_transit(value: str, listing, today) -> bool:
    if _contains(listing.station_name, value):
        return True

    walk = extract_quantity(value, WALK_MINUTES_PATTERNS)
    if walk.matched:
        return bool(listing.walk_minutes) and listing.walk_minutes <= walk.value

    return False


def _match_structure(value: str, listing, today) -> bool:
    return _contains(listing.structure, value)


def _match_age(value: str, listing, today) -> bool:
    age = listing.building_age(today)
    if age is None:
        return False

    within = extract_quantity(value, BUILT_WITHIN_PATTERNS)
    if within.matched:
        return age <= within.value

    if is_new_build(value):
        return age <= 1

    return False


def _match_yield(value: str, listing, today) -> bool:
    listing_yield = to_float(listing.yield_rate)
    if not listing_yield:
        return False

    minimum = extract_quantity(value, MIN_YIELD_PATTERNS)
    if minimum.matched:
        return listing_yield >= minimum.value

    return False


def _match_size(value: str, listing, today) -> bool:
    land = extract_quantity(value, MIN_LAND_AREA_PATTERNS)
    if land.matched:
        land_area = to_float(listing.land_area)
        return bool(land_area) and land_area >= land.value

    building = extract_quantity(value, MIN_BUILDING_AREA_PATTERNS)
    if building.matched:
        building_area = to_float(listing.building_area)
        return bool(building_area) and building_area >= building.value

    return False


def _match_other(value: str, listing, today) -> bool:
    # Free-form conditions are never machine-checked
    return False


RULE_CHECKS: Dict[PreferenceType, Callable[..., bool]] = {
    PreferenceType.AREA: _match_area,
    PreferenceType.TRANSIT: _match_transit,
    PreferenceType.STRUCTURE: _match_structure,
    PreferenceType.AGE: _match_age,
    PreferenceType.YIELD: _match_yield,
    PreferenceType.SIZE: _match_size,
    PreferenceType.OTHER: _match_other,
}

_unchecked = set(PreferenceType) - set(RULE_CHECKS)
if _unchecked:
    raise RuntimeError(f"Preference types without a check: {sorted(t.value for t in _unchecked)}")


class PreferenceMatcher:
    """Evaluate a prospect's preference rules against listings."""

    def __init__(self, clock: Clock = utc_now):
        self.clock = clock

    def matches(self, rule, listing) -> bool:
        """
        Check whether a listing satisfies one rule.

        Never raises for malformed rule text or missing listing data; those
        simply do not match.
        """
        rule_type = PreferenceType.parse(rule.rule_type)
        value = (rule.value or '').strip()
        if not value:
            return False

        check = RULE_CHECKS[rule_type]
        try:
            return bool(check(value, listing, self.clock().date()))
        except (TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Preference rule {getattr(rule, 'id', None)} ({rule_type.value}) not evaluable: {e}")
            return False

    def other_conditions_score(self, rules: Optional[Iterable], listing) -> float:
        """
        Priority-weighted share (0-100) of rules the listing satisfies.

        Returns 50.0 when the prospect has no rules.
        """
        rules = list(rules or [])
        if not rules:
            return NO_RULES_SCORE

        total_weight = 0.0
        matched_weight = 0.0
        for rule in rules:
            weight = Priority.weight_of(rule.priority)
            total_weight += weight
            if self.matches(rule, listing):
                matched_weight += weight

        if total_weight <= 0:
            return NO_RULES_SCORE
        return matched_weight / total_weight * 100
