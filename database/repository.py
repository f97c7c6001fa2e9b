import logging

from sqlalchemy.orm import Session

from database.repositories import (
    ListingRepository,
    ProspectRepository,
    MatchRepository,
    ActivityRepository,
)

logger = logging.getLogger(__name__)


class MatchmakerRepository:
    """Session-bound facade over the per-entity repositories."""

    def __init__(self, db: Session):
        self.db = db
        self.listings = ListingRepository(db)
        self.prospects = ProspectRepository(db)
        self.matches = MatchRepository(db)
        self.activities = ActivityRepository(db)

    def flush(self) -> None:
        self.db.flush()
