#!/usr/bin/env python3
"""
Generation Models - scope and run statistics for the pair generator.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class GenerationScope:
    """Restrict a run to one listing and/or one prospect; None means all."""
    listing_id: Optional[int] = None
    prospect_id: Optional[int] = None


@dataclass
class GenerationStats:
    created: int = 0
    listings_scanned: int = 0
    prospect_pages: int = 0
    pairs_scored: int = 0
    pairs_existing: int = 0
    pairs_below_threshold: int = 0
    pairs_failed: int = 0
    pages_abandoned: int = 0
    cancelled: bool = False
