import logging
from typing import List, Optional, Iterable, Set, Dict, Any

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError

from database.models import MatchRecord
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class MatchRepository(BaseRepository):
    def get(self, match_id: int) -> Optional[MatchRecord]:
        return self.db.get(MatchRecord, match_id)

    def get_for_update(self, match_id: int) -> Optional[MatchRecord]:
        """Load a record under a row lock, refreshing any stale identity-map copy."""
        stmt = (
            select(MatchRecord)
            .where(MatchRecord.id == match_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_existing_match(self, listing_id: int, prospect_id: int) -> Optional[MatchRecord]:
        stmt = select(MatchRecord).where(
            MatchRecord.listing_id == listing_id,
            MatchRecord.prospect_id == prospect_id
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def existing_prospect_ids(self, listing_id: int, prospect_ids: Iterable[int]) -> Set[int]:
        ids = list(prospect_ids)
        if not ids:
            return set()

        stmt = select(MatchRecord.prospect_id).where(
            MatchRecord.listing_id == listing_id,
            MatchRecord.prospect_id.in_(ids)
        )
        return set(self.db.execute(stmt).scalars().all())

    def insert(self, record: MatchRecord) -> bool:
        """
        Insert a record inside a SAVEPOINT.

        Returns False when the (listing, prospect) unique constraint rejects it,
        leaving the surrounding transaction usable.
        """
        try:
            with self.db.begin_nested():
                self.db.add(record)
        except IntegrityError:
            logger.info(
                f"Match for listing {record.listing_id} / prospect {record.prospect_id} "
                f"already exists, skipping"
            )
            return False
        return True

    def search(
        self,
        listing_id: Optional[int] = None,
        prospect_id: Optional[int] = None,
        status: Optional[str] = None,
        min_score: Optional[float] = None,
        not_presented_only: bool = False,
        limit: int = 15,
        offset: int = 0
    ) -> List[MatchRecord]:
        stmt = select(MatchRecord)

        if listing_id is not None:
            stmt = stmt.where(MatchRecord.listing_id == listing_id)
        if prospect_id is not None:
            stmt = stmt.where(MatchRecord.prospect_id == prospect_id)
        if status:
            stmt = stmt.where(MatchRecord.status == status)
        if min_score is not None:
            stmt = stmt.where(MatchRecord.score >= min_score)
        if not_presented_only:
            stmt = stmt.where(MatchRecord.presented_at.is_(None))

        stmt = stmt.order_by(MatchRecord.score.desc(), MatchRecord.id).limit(limit).offset(offset)
        return list(self.db.execute(stmt).scalars().all())

    def top_for_listing(self, listing_id: int, threshold: float = 70, limit: int = 10) -> List[MatchRecord]:
        stmt = (
            select(MatchRecord)
            .where(MatchRecord.listing_id == listing_id, MatchRecord.score >= threshold)
            .order_by(MatchRecord.score.desc(), MatchRecord.id)
            .limit(limit)
        )
        return list(self.db.execute(stmt).scalars().all())

    def top_for_prospect(self, prospect_id: int, threshold: float = 70, limit: int = 10) -> List[MatchRecord]:
        stmt = (
            select(MatchRecord)
            .where(MatchRecord.prospect_id == prospect_id, MatchRecord.score >= threshold)
            .order_by(MatchRecord.score.desc(), MatchRecord.id)
            .limit(limit)
        )
        return list(self.db.execute(stmt).scalars().all())

    def count_by_status(self) -> Dict[str, int]:
        stmt = select(MatchRecord.status, func.count()).group_by(MatchRecord.status)
        return {status: count for status, count in self.db.execute(stmt).all()}

    def summary(self, high_score_threshold: float = 80) -> Dict[str, Any]:
        total = self.db.execute(select(func.count()).select_from(MatchRecord)).scalar_one()
        high = self.db.execute(
            select(func.count()).select_from(MatchRecord).where(MatchRecord.score >= high_score_threshold)
        ).scalar_one()
        presented = self.db.execute(
            select(func.count()).select_from(MatchRecord).where(MatchRecord.presented_at.is_not(None))
        ).scalar_one()
        average = self.db.execute(select(func.avg(MatchRecord.score))).scalar_one()

        return {
            'total_matches': total,
            'high_score_matches': high,
            'presented_matches': presented,
            'average_score': float(average) if average is not None else None,
        }
