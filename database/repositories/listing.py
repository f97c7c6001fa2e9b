import logging
from typing import List, Optional

from sqlalchemy import select

from database.models import Listing
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class ListingRepository(BaseRepository):
    def get(self, listing_id: int) -> Optional[Listing]:
        return self.db.get(Listing, listing_id)

    def available_page(
        self,
        after_id: int = 0,
        limit: int = 100,
        listing_id: Optional[int] = None
    ) -> List[Listing]:
        """Keyset page of available listings ordered by id."""
        stmt = select(Listing).where(
            Listing.status == 'available',
            Listing.id > after_id
        )
        if listing_id is not None:
            stmt = stmt.where(Listing.id == listing_id)

        stmt = stmt.order_by(Listing.id).limit(limit)
        return list(self.db.execute(stmt).scalars().all())

    def set_status(self, listing: Listing, status: str) -> None:
        if listing.status != status:
            logger.info(f"Listing {listing.id}: {listing.status} -> {status}")
        listing.status = status
