from typing import List

from sqlalchemy import select

from database.models import Activity
from database.repositories.base import BaseRepository


class ActivityRepository(BaseRepository):
    def for_subject(self, subject_type: str, subject_id: int, limit: int = 10) -> List[Activity]:
        stmt = (
            select(Activity)
            .where(Activity.subject_type == subject_type, Activity.subject_id == subject_id)
            .order_by(Activity.occurred_at.desc(), Activity.id.desc())
            .limit(limit)
        )
        return list(self.db.execute(stmt).scalars().all())
