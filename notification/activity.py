#!/usr/bin/env python3
"""
Activity Logger - fire-and-forget audit events for match operations.

Events are written in their own short transaction after the operation that
caused them has committed. A failure here is logged and swallowed: the audit
trail must never fail or roll back the matching core.

Usage:
    from notification.activity import ActivityLogger

    activity = ActivityLogger(session_factory)
    activity.log_match_created(user_id, record)
"""

import logging
from enum import Enum
from typing import Optional, Iterable

from database.database import db_session_scope
from database.models import Activity, MatchRecord
from core.utils import format_score

logger = logging.getLogger(__name__)


class ActivityType(str, Enum):
    MATCH_CREATED = 'match_created'
    MATCH_STATUS_UPDATED = 'match_status_updated'
    MATCH_NOTE_ADDED = 'match_note_added'
    PRESENTATION = 'presentation'
    CONTRACT = 'contract'


class ActivityLogger:
    """Append activity rows outside the caller's transaction."""

    def __init__(self, session_factory=None, enabled: bool = True):
        self.session_factory = session_factory
        self.enabled = enabled

    def log(
        self,
        user_id: Optional[int],
        activity_type: ActivityType,
        subject_type: str,
        subject_id: int,
        title: str,
        description: Optional[str] = None
    ) -> bool:
        """Write one event. Returns False (and logs) instead of raising on failure."""
        return self.log_many([
            Activity(
                user_id=user_id,
                activity_type=ActivityType(activity_type).value,
                subject_type=subject_type,
                subject_id=subject_id,
                title=title,
                description=description,
            )
        ])

    def log_many(self, activities: Iterable[Activity]) -> bool:
        activities = list(activities)
        if not self.enabled or not activities:
            return True
        try:
            with db_session_scope(self.session_factory) as session:
                session.add_all(activities)
            return True
        except Exception as e:
            logger.error(f"Failed to record {len(activities)} activity event(s): {e}", exc_info=True)
            return False

    @staticmethod
    def match_created_event(user_id: Optional[int], record: MatchRecord) -> Activity:
        return Activity(
            user_id=user_id,
            activity_type=ActivityType.MATCH_CREATED.value,
            subject_type='match',
            subject_id=record.id,
            title="Match created",
            description=(
                f"Listing: {record.listing_id}, prospect: {record.prospect_id}, "
                f"score: {format_score(record.score)}"
            ),
        )

    def log_match_created(self, user_id: Optional[int], record: MatchRecord) -> bool:
        return self.log_many([self.match_created_event(user_id, record)])

    def log_status_updated(
        self,
        user_id: Optional[int],
        record: MatchRecord,
        previous_status: str,
        new_status: str,
        note: Optional[str] = None
    ) -> bool:
        return self.log(
            user_id,
            ActivityType.MATCH_STATUS_UPDATED,
            'match',
            record.id,
            f"Match status changed from '{previous_status}' to '{new_status}'",
            note,
        )

    def log_presentation(self, user_id: Optional[int], record: MatchRecord, comment: Optional[str] = None) -> bool:
        description = f"Listing: {record.listing_id}, prospect: {record.prospect_id}"
        if comment:
            description += f", comment: {comment}"
        return self.log(user_id, ActivityType.PRESENTATION, 'match', record.id, "Listing presented", description)

    def log_contract(self, user_id: Optional[int], record: MatchRecord, price: Optional[int] = None) -> bool:
        description = f"Listing: {record.listing_id}, prospect: {record.prospect_id}"
        if price is not None:
            description += f", contract price: {price}"
        return self.log(user_id, ActivityType.CONTRACT, 'match', record.id, "Contract signed", description)

    def log_note_added(self, user_id: Optional[int], record: MatchRecord, note: str) -> bool:
        return self.log(user_id, ActivityType.MATCH_NOTE_ADDED, 'match', record.id, "Note added to match", note)
