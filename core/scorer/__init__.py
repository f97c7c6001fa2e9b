#!/usr/bin/env python3
"""
Scoring Module - pair compatibility scores.

Public API:
- ScoringService: holds both recipes
- GenerationRecipe / DetailRecipe: the two named weighting schemes
- ScoreBreakdown: total plus per-signal scores

- models.py: ScoreBreakdown
- generation.py: generation-time recipe and its sub-scorers
- detail.py: detail-view recipe and its sub-scorers
- service.py: ScoringService
"""

from core.scorer.models import ScoreBreakdown
from core.scorer.generation import GenerationRecipe
from core.scorer.detail import DetailRecipe
from core.scorer.service import ScoringService

__all__ = ['ScoringService', 'ScoreBreakdown', 'GenerationRecipe', 'DetailRecipe']
