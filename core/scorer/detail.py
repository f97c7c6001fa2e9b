#!/usr/bin/env python3
"""
Detail-view recipe, used when rendering one pair's breakdown on demand.

Sub-scores are 0-1; weights are budget 30, area 25, category 20, size 15,
yield 10. The weighted sum is scaled to 0-100 and rounded half-up to 1 decimal.
This recipe is deliberately stricter than the generation recipe (exact
region and category equality) and is not derived from it.
"""

from typing import Optional
import logging

from core.config_loader import DetailWeights
from core.matcher.preference_matcher import PreferenceMatcher
from core.scorer.models import ScoreBreakdown
from core.utils import round_half_up, to_float

logger = logging.getLogger(__name__)

MISSING = 0.5

# (upper bound as a multiple of budget_max, score)
OVER_BUDGET_STEPS = (
    (1.1, 0.8),
    (1.2, 0.6),
    (1.3, 0.4),
)

# (max yield shortfall as a share of the requirement, score)
YIELD_STEPS = (
    (0.9, 0.8),
    (0.8, 0.6),
    (0.7, 0.4),
)


def budget_score(price, budget_min, budget_max) -> float:
    if not budget_min or not budget_max or price is None:
        return MISSING

    if price <= budget_min:
        return 0.3
    if price <= budget_max:
        return 1.0
    for multiple, score in OVER_BUDGET_STEPS:
        if price <= budget_max * multiple:
            return score
    return 0.0


def area_score(listing_region: Optional[str], area_preference: Optional[str]) -> float:
    if not area_preference:
        return MISSING
    return 1.0 if listing_region == area_preference else 0.0


def category_score(listing_category: Optional[str], category_preference: Optional[str]) -> float:
    if not category_preference:
        return MISSING
    return 1.0 if listing_category == category_preference else 0.0


def size_score(building_area, area_requirement) -> float:
    listing_size = to_float(building_area)
    required = to_float(area_requirement)
    if not listing_size or not required:
        return MISSING

    ratio = listing_size / required
    if 0.8 <= ratio <= 1.2:
        return 1.0
    if 0.6 <= ratio < 0.8 or 1.2 < ratio <= 1.4:
        return 0.8
    if 0.4 <= ratio < 0.6 or 1.4 < ratio <= 1.6:
        return 0.6
    if 0.2 <= ratio < 0.4 or 1.6 < ratio <= 1.8:
        return 0.4
    return 0.0


def yield_score(listing_yield, yield_requirement) -> float:
    actual = to_float(listing_yield)
    required = to_float(yield_requirement)
    if not actual or not required:
        return MISSING

    if actual >= required:
        return 1.0
    for share, score in YIELD_STEPS:
        if actual >= required * share:
            return score
    return 0.0


class DetailRecipe:
    """Weighted breakdown shown on a single match."""

    name = 'detail'

    def __init__(
        self,
        weights: Optional[DetailWeights] = None,
        preference_matcher: Optional[PreferenceMatcher] = None
    ):
        self.weights = weights or DetailWeights()
        self.preference_matcher = preference_matcher or PreferenceMatcher()

    def score(self, listing, prospect) -> ScoreBreakdown:
        signals = {
            'budget': budget_score(listing.price, prospect.budget_min, prospect.budget_max),
            'area': area_score(listing.region, prospect.area_preference),
            'type': category_score(listing.category, prospect.category_preference),
            'size': size_score(listing.building_area, prospect.area_requirement),
            'yield': yield_score(listing.yield_rate, prospect.yield_requirement),
        }
        weights = {
            'budget': self.weights.budget,
            'area': self.weights.area,
            'type': self.weights.category,
            'size': self.weights.size,
            'yield': self.weights.yield_,
        }

        total = 0.0
        for name in ('budget', 'area', 'type', 'size', 'yield'):
            total += signals[name] * (weights[name] / 100.0)

        other_conditions = self.preference_matcher.other_conditions_score(
            getattr(prospect, 'preference_rules', None), listing
        )

        return ScoreBreakdown(
            recipe=self.name,
            total=round_half_up(total * 100, 1),
            signals={k: round_half_up(v * 100, 1) for k, v in signals.items()},
            weights=weights,
            informational={'other_conditions': round_half_up(other_conditions, 1)},
        )
