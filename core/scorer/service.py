#!/usr/bin/env python3
"""
Scoring Service - entry point for both scoring recipes.

- generation recipe: bulk candidate creation (category/area/size/budget)
- detail recipe: on-demand breakdown of one pair (budget/area/type/size/yield)

Both are pure: no store access, no clock reads beyond the injected clock
used for building-age preference rules.
"""

from typing import Optional
import logging

from core.config_loader import ScoringConfig
from core.matcher.preference_matcher import PreferenceMatcher
from core.scorer.detail import DetailRecipe
from core.scorer.generation import GenerationRecipe
from core.scorer.models import ScoreBreakdown
from core.utils import Clock, utc_now

logger = logging.getLogger(__name__)


class ScoringService:
    """Compute compatibility scores for (listing, prospect) pairs."""

    def __init__(self, config: Optional[ScoringConfig] = None, clock: Clock = utc_now):
        self.config = config or ScoringConfig()
        self.preference_matcher = PreferenceMatcher(clock=clock)
        self.generation_recipe = GenerationRecipe(
            weights=self.config.generation,
            size_mode=self.config.size_mode,
            preference_matcher=self.preference_matcher,
        )
        self.detail_recipe = DetailRecipe(
            weights=self.config.detail,
            preference_matcher=self.preference_matcher,
        )

    def score_for_generation(self, listing, prospect) -> ScoreBreakdown:
        breakdown = self.generation_recipe.score(listing, prospect)
        logger.debug(
            f"Listing {getattr(listing, 'id', None)} x prospect {getattr(prospect, 'id', None)}: "
            f"generation={breakdown.total:.2f}"
        )
        return breakdown

    def score_for_detail(self, listing, prospect) -> ScoreBreakdown:
        return self.detail_recipe.score(listing, prospect)

    def recipe(self, name: str):
        if name == GenerationRecipe.name:
            return self.generation_recipe
        if name == DetailRecipe.name:
            return self.detail_recipe
        raise ValueError(f"Unknown scoring recipe: {name}")
