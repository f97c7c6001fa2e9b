#!/usr/bin/env python3
"""
Match Service - invocation surface of the matching core.

Wraps the generator, scorer and lifecycle behind entity ids. Every call opens
its own unit of work; activity events are written after the unit commits so
an audit failure never rolls back a match operation.

Operations:
- generate_matches / score_pair
- transition_match / add_note
- match_detail / search_matches / recommended_prospects / recommended_listings
- statistics
"""

from typing import Optional, Dict, Any, List
import logging

from core.exceptions import NotFoundError, ValidationError
from core.generator import GenerationScope, PairGenerator
from core.lifecycle import MatchLifecycle, MatchStatus, status_history
from core.scorer.service import ScoringService
from core.utils import round_half_up, to_float
from database.models import MatchRecord
from database.uow import match_uow
from notification.activity import ActivityLogger

logger = logging.getLogger(__name__)

HIGH_SCORE_THRESHOLD = 80.0
RECOMMENDATION_THRESHOLD = 70.0
RECOMMENDATION_LIMIT = 10
DETAIL_ACTIVITY_LIMIT = 10


def conversion_rate(converted: int, source: int) -> float:
    """Percentage with two decimals; 0 when there is nothing to convert from."""
    if not source:
        return 0.0
    return round_half_up(converted / source * 100, 2)


class MatchService:
    """Entry point for match generation, scoring and funnel operations."""

    def __init__(
        self,
        scoring: ScoringService,
        generator: PairGenerator,
        lifecycle: MatchLifecycle,
        activity_logger: Optional[ActivityLogger] = None,
        session_factory=None
    ):
        self.scoring = scoring
        self.generator = generator
        self.lifecycle = lifecycle
        self.activity_logger = activity_logger
        self.session_factory = session_factory

    # ---- generation & scoring ----

    def generate_matches(
        self,
        listing_id: Optional[int] = None,
        prospect_id: Optional[int] = None,
        min_score: Optional[float] = None,
        user_id: Optional[int] = None
    ) -> int:
        """Create match records for pairs at or above min_score. Returns the count created."""
        if min_score is not None:
            try:
                min_score = float(min_score)
            except (TypeError, ValueError):
                raise ValidationError(f"min_score must be a number, got {min_score!r}") from None
            if not 0 <= min_score <= 100:
                raise ValidationError(f"min_score must be within 0-100, got {min_score}")

        if listing_id is not None or prospect_id is not None:
            with match_uow(self.session_factory) as repo:
                if listing_id is not None and repo.listings.get(listing_id) is None:
                    raise NotFoundError(f"Listing {listing_id} not found")
                if prospect_id is not None and repo.prospects.get(prospect_id) is None:
                    raise NotFoundError(f"Prospect {prospect_id} not found")

        scope = GenerationScope(listing_id=listing_id, prospect_id=prospect_id)
        return self.generator.generate(scope=scope, min_score=min_score, user_id=user_id)

    def score_pair(self, listing_id: int, prospect_id: int, recipe: str = 'detail') -> Dict[str, Any]:
        """Score one pair on demand without persisting anything."""
        with match_uow(self.session_factory) as repo:
            listing, prospect = self._load_pair(repo, listing_id, prospect_id)

        try:
            scorer = self.scoring.recipe(recipe)
        except ValueError as e:
            raise ValidationError(str(e)) from None

        result = scorer.score(listing, prospect).to_dict()
        result['listing_id'] = listing_id
        result['prospect_id'] = prospect_id
        return result

    @staticmethod
    def _load_pair(repo, listing_id: int, prospect_id: int):
        listing = repo.listings.get(listing_id)
        if listing is None:
            raise NotFoundError(f"Listing {listing_id} not found")
        prospect = repo.prospects.get_with_rules(prospect_id)
        if prospect is None:
            raise NotFoundError(f"Prospect {prospect_id} not found")
        return listing, prospect

    # ---- lifecycle ----

    def transition_match(
        self,
        match_id: int,
        new_status,
        note: Optional[str] = None,
        user_id: Optional[int] = None
    ) -> MatchRecord:
        with match_uow(self.session_factory) as repo:
            result = self.lifecycle.transition(repo, match_id, new_status, note=note)
            listing_price = None
            if result.new_status is MatchStatus.CONTRACTED:
                listing = repo.listings.get(result.record.listing_id)
                listing_price = listing.price if listing is not None else None

        record = result.record
        if self.activity_logger:
            self.activity_logger.log_status_updated(
                user_id, record, result.previous_status, result.new_status.value, note
            )
            if result.new_status is MatchStatus.PRESENTED:
                self.activity_logger.log_presentation(user_id, record, note)
            elif result.new_status is MatchStatus.CONTRACTED:
                self.activity_logger.log_contract(user_id, record, listing_price)
        return record

    def add_note(self, match_id: int, text: str, user_id: Optional[int] = None) -> MatchRecord:
        with match_uow(self.session_factory) as repo:
            record = self.lifecycle.add_note(repo, match_id, text)

        if self.activity_logger:
            self.activity_logger.log_note_added(user_id, record, text.strip())
        return record

    # ---- reads ----

    def match_detail(self, match_id: int) -> Dict[str, Any]:
        """Record, detail-recipe breakdown, funnel history and recent activity for one match."""
        with match_uow(self.session_factory) as repo:
            record = repo.matches.get(match_id)
            if record is None:
                raise NotFoundError(f"Match {match_id} not found")
            listing, prospect = self._load_pair(repo, record.listing_id, record.prospect_id)
            activities = repo.activities.for_subject('match', match_id, limit=DETAIL_ACTIVITY_LIMIT)

        breakdown = self.scoring.score_for_detail(listing, prospect)
        return {
            'match': record,
            'listing': listing,
            'prospect': prospect,
            'score_level': record.score_level,
            'breakdown': breakdown.to_dict(),
            'history': status_history(record),
            'activities': activities,
        }

    def search_matches(
        self,
        listing_id: Optional[int] = None,
        prospect_id: Optional[int] = None,
        status: Optional[str] = None,
        min_score: Optional[float] = None,
        not_presented_only: bool = False,
        limit: int = 15,
        offset: int = 0
    ) -> List[MatchRecord]:
        if status:
            status = MatchStatus.parse(status).value
        with match_uow(self.session_factory) as repo:
            return repo.matches.search(
                listing_id=listing_id,
                prospect_id=prospect_id,
                status=status,
                min_score=min_score,
                not_presented_only=not_presented_only,
                limit=limit,
                offset=offset,
            )

    def recommended_prospects(self, listing_id: int) -> List[MatchRecord]:
        """Best-scoring matches for a listing (score >= 70, at most 10)."""
        with match_uow(self.session_factory) as repo:
            if repo.listings.get(listing_id) is None:
                raise NotFoundError(f"Listing {listing_id} not found")
            return repo.matches.top_for_listing(
                listing_id, threshold=RECOMMENDATION_THRESHOLD, limit=RECOMMENDATION_LIMIT
            )

    def recommended_listings(self, prospect_id: int) -> List[MatchRecord]:
        """Best-scoring matches for a prospect (score >= 70, at most 10)."""
        with match_uow(self.session_factory) as repo:
            if repo.prospects.get(prospect_id) is None:
                raise NotFoundError(f"Prospect {prospect_id} not found")
            return repo.matches.top_for_prospect(
                prospect_id, threshold=RECOMMENDATION_THRESHOLD, limit=RECOMMENDATION_LIMIT
            )

    def statistics(self) -> Dict[str, Any]:
        with match_uow(self.session_factory) as repo:
            summary = repo.matches.summary(high_score_threshold=HIGH_SCORE_THRESHOLD)
            by_status = repo.matches.count_by_status()

        def count(status: MatchStatus) -> int:
            return by_status.get(status.value, 0)

        average = to_float(summary['average_score'])

        return {
            'total_matches': summary['total_matches'],
            'high_score_matches': summary['high_score_matches'],
            'presented_matches': summary['presented_matches'],
            'contracted_matches': count(MatchStatus.CONTRACTED),
            'average_score': round_half_up(average, 2) if average is not None else 0.0,
            'by_status': {status.value: count(status) for status in MatchStatus},
            'conversion_rates': {
                'presented_to_interested': conversion_rate(
                    count(MatchStatus.INTERESTED), count(MatchStatus.PRESENTED)
                ),
                'interested_to_contracted': conversion_rate(
                    count(MatchStatus.CONTRACTED), count(MatchStatus.INTERESTED)
                ),
                'matched_to_contracted': conversion_rate(
                    count(MatchStatus.CONTRACTED), count(MatchStatus.MATCHED)
                ),
            },
        }
