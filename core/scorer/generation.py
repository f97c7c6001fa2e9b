#!/usr/bin/env python3
"""
Generation-time recipe, used when bulk-creating match candidates.

Sub-scores are 0-100; weights are category 30, area 25, size 25, budget 20.
The weighted total is rounded half-up to 2 decimals.
"""

from typing import Optional
import logging

from core.config_loader import GenerationWeights
from core.matcher.extraction import extract_tsubo_requirement
from core.matcher.preference_matcher import PreferenceMatcher
from core.scorer.models import ScoreBreakdown
from core.utils import round_half_up, to_float

logger = logging.getLogger(__name__)

NEUTRAL_SCORE = 50.0
# 1 tsubo = 3.30579 m²
SQM_PER_TSUBO = 3.30579
NO_LAND_AREA_SCORE = 30.0
FLAT_LAND_AREA_SCORE = 60.0

# (max relative difference, score), checked in order
SIZE_TIERS = (
    (0.1, 100.0),
    (0.2, 80.0),
    (0.3, 60.0),
    (0.5, 40.0),
)
SIZE_FLOOR_SCORE = 20.0


def category_match(listing, prospect) -> float:
    accepted = prospect.accepted_categories
    if not accepted:
        return NEUTRAL_SCORE
    return 100.0 if listing.category in accepted else 0.0


def area_match(listing, prospect) -> float:
    preference = prospect.area_preference
    if not preference:
        return NEUTRAL_SCORE

    if preference in listing.full_address:
        return 100.0
    if listing.region and listing.region in preference:
        return 100.0
    if listing.locality and listing.locality in preference:
        return 100.0
    return 0.0


def size_match(listing, prospect) -> float:
    """Tiered comparison of land area (tsubo) against the requirement in the prospect's remarks."""
    land_area = to_float(listing.land_area)
    if not land_area:
        return NO_LAND_AREA_SCORE

    requirement = extract_tsubo_requirement(prospect.remarks, prospect.detailed_requirements)
    if not requirement.matched:
        return NEUTRAL_SCORE

    listing_tsubo = land_area / SQM_PER_TSUBO
    difference = abs(listing_tsubo - requirement.value) / requirement.value

    for max_difference, score in SIZE_TIERS:
        if difference <= max_difference:
            return score
    return SIZE_FLOOR_SCORE


def flat_size_match(listing, prospect) -> float:
    """Batch placeholder: any land area counts as a moderate fit."""
    if to_float(listing.land_area):
        return FLAT_LAND_AREA_SCORE
    return NEUTRAL_SCORE


def budget_match(listing, prospect) -> float:
    price = listing.price
    # Zero bounds are unconstrained, as in the candidate pre-filter
    budget_min = prospect.budget_min or None
    budget_max = prospect.budget_max or None

    if price is None or (budget_min is None and budget_max is None):
        return NEUTRAL_SCORE

    if (budget_min is None or price >= budget_min) and (budget_max is None or price <= budget_max):
        return 100.0

    if budget_max and price > budget_max:
        penalty = 100.0 * (price - budget_max) / budget_max
        return max(0.0, 100.0 - penalty)

    # Undershooting the budget is penalised at half the rate
    if budget_min and price < budget_min:
        penalty = 50.0 * (budget_min - price) / budget_min
        return max(0.0, 100.0 - penalty)

    return 0.0


def yield_match(listing, prospect) -> float:
    requirement = to_float(prospect.yield_requirement)
    listing_yield = to_float(listing.yield_rate)
    if not requirement or not listing_yield:
        return NEUTRAL_SCORE

    if listing_yield >= requirement:
        return 100.0

    shortfall_rate = min((requirement - listing_yield) / requirement, 1.0)
    return max(0.0, 100.0 - shortfall_rate * 100.0)


class GenerationRecipe:
    """Weighted 0-100 score used by the pair generator."""

    name = 'generation'

    def __init__(
        self,
        weights: Optional[GenerationWeights] = None,
        size_mode: str = 'tiered',
        preference_matcher: Optional[PreferenceMatcher] = None
    ):
        self.weights = weights or GenerationWeights()
        if size_mode not in ('tiered', 'flat'):
            raise ValueError(f"Unknown size_mode: {size_mode}")
        self.size_mode = size_mode
        self.preference_matcher = preference_matcher or PreferenceMatcher()

    def score(self, listing, prospect) -> ScoreBreakdown:
        size_signal = size_match if self.size_mode == 'tiered' else flat_size_match

        signals = {
            'category': category_match(listing, prospect),
            'area': area_match(listing, prospect),
            'size': size_signal(listing, prospect),
            'budget': budget_match(listing, prospect),
        }
        weights = {
            'category': self.weights.category,
            'area': self.weights.area,
            'size': self.weights.size,
            'budget': self.weights.budget,
        }

        total = 0.0
        for name in ('category', 'area', 'size', 'budget'):
            total += signals[name] * weights[name] / 100.0

        informational = {
            'yield': round_half_up(yield_match(listing, prospect), 2),
            'other_conditions': round_half_up(
                self.preference_matcher.other_conditions_score(
                    getattr(prospect, 'preference_rules', None), listing
                ),
                2
            ),
        }

        return ScoreBreakdown(
            recipe=self.name,
            total=round_half_up(total, 2),
            signals={k: round_half_up(v, 2) for k, v in signals.items()},
            weights=weights,
            informational=informational,
        )
