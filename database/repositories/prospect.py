import logging
from typing import List, Optional

from sqlalchemy import select, or_, func, literal
from sqlalchemy.orm import selectinload

from database.models import Listing, Prospect, PreferenceRule
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class ProspectRepository(BaseRepository):
    def get(self, prospect_id: int) -> Optional[Prospect]:
        return self.db.get(Prospect, prospect_id)

    def get_with_rules(self, prospect_id: int) -> Optional[Prospect]:
        stmt = (
            select(Prospect)
            .where(Prospect.id == prospect_id)
            .options(selectinload(Prospect.preference_rules))
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def candidate_page(
        self,
        listing: Listing,
        after_id: int = 0,
        limit: int = 200,
        prospect_id: Optional[int] = None
    ) -> List[Prospect]:
        """
        Keyset page of active prospects that survive the cheap pre-filters for a listing.

        - budget range overlaps the price (NULL or zero bounds are unconstrained)
        - category preference listing no categories or containing the listing category
        - area preference empty, contained in the full address, or naming the region/locality

        Preference rules are eager-loaded so the page can be scored detached.
        """
        stmt = select(Prospect).where(
            Prospect.status == 'active',
            Prospect.id > after_id
        )
        if prospect_id is not None:
            stmt = stmt.where(Prospect.id == prospect_id)

        if listing.price is not None:
            price = int(listing.price)
            stmt = stmt.where(
                or_(Prospect.budget_min.is_(None), Prospect.budget_min <= price),
                or_(Prospect.budget_max.is_(None), Prospect.budget_max == 0, Prospect.budget_max >= price)
            )

        if listing.category:
            stmt = stmt.where(or_(
                Prospect.category_preference.is_(None),
                func.trim(func.replace(Prospect.category_preference, ',', '')) == '',
                Prospect.category_preference.contains(listing.category, autoescape=True)
            ))

        area_clauses = [
            Prospect.area_preference.is_(None),
            Prospect.area_preference == '',
            literal(listing.full_address).contains(Prospect.area_preference),
        ]
        if listing.region:
            area_clauses.append(Prospect.area_preference.contains(listing.region, autoescape=True))
        if listing.locality:
            area_clauses.append(Prospect.area_preference.contains(listing.locality, autoescape=True))
        stmt = stmt.where(or_(*area_clauses))

        stmt = (
            stmt.options(selectinload(Prospect.preference_rules))
            .order_by(Prospect.id)
            .limit(limit)
        )
        return list(self.db.execute(stmt).scalars().all())

    def rules_for(self, prospect_id: int) -> List[PreferenceRule]:
        stmt = (
            select(PreferenceRule)
            .where(PreferenceRule.prospect_id == prospect_id)
            .order_by(PreferenceRule.id)
        )
        return list(self.db.execute(stmt).scalars().all())

    def set_status(self, prospect: Prospect, status: str) -> None:
        if prospect.status != status:
            logger.info(f"Prospect {prospect.id}: {prospect.status} -> {status}")
        prospect.status = status
