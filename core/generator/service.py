#!/usr/bin/env python3
"""
Pair Generator - bulk creation of match candidates.

Walks available listings in id-ordered pages; for each listing walks the
pre-filtered active prospects in pages, scores each pair with the generation
recipe and inserts a MatchRecord for every pair that clears the threshold.

Guarantees:
- Never loads a whole table: listings and prospects are keyset-paged.
- At most one record per (listing, prospect): existing pairs are skipped and
  the storage unique constraint is the final arbiter (SAVEPOINT per insert).
- One transaction per (listing, prospect page); a page is written completely
  or not at all.
- A pair that fails to score is skipped; a page whose store calls keep
  failing is abandoned and the run moves on.
- Cancellation is honoured between pages only.
- Existing records are never modified or deleted.
"""

import logging
import threading
from typing import List, Optional, Set, Tuple

from tenacity import (
    Retrying,
    stop_after_attempt,
    wait_fixed,
    retry_if_exception_type,
    before_sleep_log,
)

from core.config_loader import GenerationConfig
from core.exceptions import TransientStoreError
from core.generator.models import GenerationScope, GenerationStats
from core.generator.reason import build_reason
from core.scorer.models import ScoreBreakdown
from core.scorer.service import ScoringService
from database.models import Listing, MatchRecord, Prospect
from database.uow import match_uow
from notification.activity import ActivityLogger

logger = logging.getLogger(__name__)

ScoredPair = Tuple[Prospect, ScoreBreakdown]


class PairGenerator:
    """Generate MatchRecords for (listing, prospect) pairs above a score threshold."""

    def __init__(
        self,
        scoring: ScoringService,
        config: Optional[GenerationConfig] = None,
        session_factory=None,
        activity_logger: Optional[ActivityLogger] = None,
        cancel_event: Optional[threading.Event] = None
    ):
        self.scoring = scoring
        self.config = config or GenerationConfig()
        self.session_factory = session_factory
        self.activity_logger = activity_logger
        self.cancel_event = cancel_event

    def _retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(self.config.max_page_retries),
            wait=wait_fixed(self.config.retry_wait_seconds),
            retry=retry_if_exception_type(TransientStoreError),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

    def _with_retry(self, fn, *args):
        return self._retrying()(fn, *args)

    def _cancelled(self, stats: GenerationStats) -> bool:
        if self.cancel_event is not None and self.cancel_event.is_set():
            if not stats.cancelled:
                logger.info("Generation cancelled; stopping at page boundary")
            stats.cancelled = True
        return stats.cancelled

    def generate(
        self,
        scope: Optional[GenerationScope] = None,
        min_score: Optional[float] = None,
        user_id: Optional[int] = None
    ) -> int:
        """Run generation and return the number of newly created records."""
        return self.run(scope=scope, min_score=min_score, user_id=user_id).created

    def run(
        self,
        scope: Optional[GenerationScope] = None,
        min_score: Optional[float] = None,
        user_id: Optional[int] = None
    ) -> GenerationStats:
        scope = scope or GenerationScope()
        threshold = self.config.min_score if min_score is None else float(min_score)
        stats = GenerationStats()

        logger.info(
            f"Generating matches: listing={scope.listing_id or 'all'}, "
            f"prospect={scope.prospect_id or 'all'}, min_score={threshold}"
        )

        after_listing_id = 0
        while not self._cancelled(stats):
            try:
                listings = self._with_retry(self._load_listing_page, scope, after_listing_id)
            except TransientStoreError:
                logger.error(
                    f"Could not load listings after id {after_listing_id}; stopping run",
                    exc_info=True
                )
                stats.pages_abandoned += 1
                break

            if not listings:
                break

            for listing in listings:
                if self._cancelled(stats):
                    break
                self._process_listing(listing, scope, threshold, user_id, stats)
                stats.listings_scanned += 1

            after_listing_id = listings[-1].id
            if len(listings) < self.config.listing_page_size:
                break

        logger.info(
            f"Generation finished: created={stats.created}, listings={stats.listings_scanned}, "
            f"scored={stats.pairs_scored}, existing={stats.pairs_existing}, "
            f"below_threshold={stats.pairs_below_threshold}, failed={stats.pairs_failed}, "
            f"abandoned_pages={stats.pages_abandoned}, cancelled={stats.cancelled}"
        )
        return stats

    def _load_listing_page(self, scope: GenerationScope, after_id: int) -> List[Listing]:
        with match_uow(self.session_factory) as repo:
            return repo.listings.available_page(
                after_id=after_id,
                limit=self.config.listing_page_size,
                listing_id=scope.listing_id,
            )

    def _load_candidate_page(
        self,
        listing: Listing,
        scope: GenerationScope,
        after_id: int
    ) -> Tuple[List[Prospect], Set[int]]:
        with match_uow(self.session_factory) as repo:
            prospects = repo.prospects.candidate_page(
                listing,
                after_id=after_id,
                limit=self.config.prospect_page_size,
                prospect_id=scope.prospect_id,
            )
            existing = repo.matches.existing_prospect_ids(listing.id, [p.id for p in prospects])
            return prospects, existing

    def _process_listing(
        self,
        listing: Listing,
        scope: GenerationScope,
        threshold: float,
        user_id: Optional[int],
        stats: GenerationStats
    ) -> None:
        after_prospect_id = 0
        while not self._cancelled(stats):
            try:
                prospects, existing = self._with_retry(
                    self._load_candidate_page, listing, scope, after_prospect_id
                )
            except TransientStoreError:
                logger.error(
                    f"Listing {listing.id}: could not load prospects after id {after_prospect_id}; "
                    f"skipping the rest of this listing",
                    exc_info=True
                )
                stats.pages_abandoned += 1
                return

            if not prospects:
                return

            stats.prospect_pages += 1
            after_prospect_id = prospects[-1].id

            candidates = self._score_page(listing, prospects, existing, threshold, stats)
            if candidates:
                try:
                    created = self._with_retry(self._persist_page, listing, candidates, user_id)
                except TransientStoreError:
                    logger.error(
                        f"Listing {listing.id}: page of {len(candidates)} candidates not persisted",
                        exc_info=True
                    )
                    stats.pages_abandoned += 1
                else:
                    stats.created += len(created)
                    stats.pairs_existing += len(candidates) - len(created)
                    self._record_activity(user_id, created)

            if len(prospects) < self.config.prospect_page_size:
                return

    def _score_page(
        self,
        listing: Listing,
        prospects: List[Prospect],
        existing: Set[int],
        threshold: float,
        stats: GenerationStats
    ) -> List[ScoredPair]:
        candidates = []
        for prospect in prospects:
            if prospect.id in existing:
                stats.pairs_existing += 1
                continue

            try:
                breakdown = self.scoring.score_for_generation(listing, prospect)
            except Exception as e:
                # A single malformed record must not abort the batch
                logger.warning(
                    f"Scoring failed for listing {listing.id} / prospect {prospect.id}: {e}",
                    exc_info=True
                )
                stats.pairs_failed += 1
                continue

            stats.pairs_scored += 1
            if breakdown.total < threshold:
                stats.pairs_below_threshold += 1
                continue
            candidates.append((prospect, breakdown))
        return candidates

    def _persist_page(
        self,
        listing: Listing,
        candidates: List[ScoredPair],
        user_id: Optional[int]
    ) -> List[MatchRecord]:
        created = []
        with match_uow(self.session_factory) as repo:
            existing = repo.matches.existing_prospect_ids(listing.id, [p.id for p, _ in candidates])
            for prospect, breakdown in candidates:
                if prospect.id in existing:
                    continue

                record = MatchRecord(
                    listing_id=listing.id,
                    prospect_id=prospect.id,
                    score=breakdown.total,
                    reason=build_reason(breakdown),
                    status='matched',
                    created_by=user_id,
                )
                if repo.matches.insert(record):
                    created.append(record)

        if created:
            logger.info(f"Listing {listing.id}: created {len(created)} match(es)")
        return created

    def _record_activity(self, user_id: Optional[int], records: List[MatchRecord]) -> None:
        if not self.activity_logger or not records:
            return
        self.activity_logger.log_many(
            ActivityLogger.match_created_event(user_id, record) for record in records
        )
