#!/usr/bin/env python3
"""
Match Lifecycle - funnel transitions and their side effects.

Rules:
- Unknown target status is rejected before anything is read.
- Records in a terminal state (contracted, expired) cannot move.
- Entering a state stamps its timestamp; repeating the current state keeps
  the timestamp already recorded.
- Entering contracted marks the listing sold and the prospect closed.
- The record is read under a row lock and written with a version check, so a
  concurrent writer fails with ConflictError and its side effects roll back
  with its transaction.
"""

from dataclasses import dataclass
from typing import Optional, List, Dict, Any
import logging

from sqlalchemy.orm.exc import StaleDataError

from core.exceptions import ConflictError, NotFoundError, ValidationError
from core.lifecycle.notes import append_note
from core.lifecycle.states import (
    MatchStatus,
    RESPONSE_STATES,
    is_terminal,
    timestamp_field,
)
from core.utils import Clock, utc_now
from database.models import MatchRecord
from database.repository import MatchmakerRepository

logger = logging.getLogger(__name__)

LISTING_SOLD = 'sold'
PROSPECT_CLOSED = 'closed'


@dataclass
class TransitionResult:
    record: MatchRecord
    previous_status: str
    new_status: MatchStatus

    @property
    def changed(self) -> bool:
        return self.previous_status != self.new_status.value


class MatchLifecycle:
    """State machine over MatchRecord. Operates on a caller-supplied unit of work."""

    def __init__(self, clock: Clock = utc_now, note_max_length: int = 1000):
        self.clock = clock
        self.note_max_length = note_max_length

    def _validate_note(self, note: Optional[str], required: bool = False) -> Optional[str]:
        if note is None:
            if required:
                raise ValidationError("Note text is required")
            return None
        if not isinstance(note, str):
            raise ValidationError("Note must be a string")
        note = note.strip()
        if not note:
            if required:
                raise ValidationError("Note text is required")
            return None
        if len(note) > self.note_max_length:
            raise ValidationError(f"Note exceeds {self.note_max_length} characters")
        return note

    def _load(self, repo: MatchmakerRepository, match_id: int) -> MatchRecord:
        record = repo.matches.get_for_update(match_id)
        if record is None:
            raise NotFoundError(f"Match {match_id} not found")
        return record

    def _flush(self, repo: MatchmakerRepository, match_id: int) -> None:
        try:
            repo.flush()
        except StaleDataError as e:
            raise ConflictError(f"Match {match_id} was modified concurrently") from e

    def transition(
        self,
        repo: MatchmakerRepository,
        match_id: int,
        new_status,
        note: Optional[str] = None
    ) -> TransitionResult:
        target = MatchStatus.parse(new_status)
        note = self._validate_note(note)

        record = self._load(repo, match_id)
        previous = record.status

        if is_terminal(previous):
            raise ConflictError(f"Match {match_id} is {previous}; no further transitions allowed")

        now = self.clock()
        field = timestamp_field(target)
        if field and (getattr(record, field) is None or previous != target.value):
            setattr(record, field, now)

        if note:
            record.notes = append_note(record.notes, note, now)
            if target is MatchStatus.PRESENTED or target in RESPONSE_STATES:
                record.response_comment = note

        record.status = target.value
        self._flush(repo, match_id)

        if target is MatchStatus.CONTRACTED:
            self._apply_contract(repo, record)
            self._flush(repo, match_id)

        if previous != target.value:
            logger.info(f"Match {match_id}: {previous} -> {target.value}")

        return TransitionResult(record=record, previous_status=previous, new_status=target)

    def _apply_contract(self, repo: MatchmakerRepository, record: MatchRecord) -> None:
        listing = repo.listings.get(record.listing_id)
        if listing is None:
            raise NotFoundError(f"Listing {record.listing_id} not found")
        prospect = repo.prospects.get(record.prospect_id)
        if prospect is None:
            raise NotFoundError(f"Prospect {record.prospect_id} not found")

        repo.listings.set_status(listing, LISTING_SOLD)
        repo.prospects.set_status(prospect, PROSPECT_CLOSED)

    def add_note(self, repo: MatchmakerRepository, match_id: int, text: str) -> MatchRecord:
        """Append a timestamped note. Allowed in every state, including terminal ones."""
        text = self._validate_note(text, required=True)
        record = self._load(repo, match_id)
        record.notes = append_note(record.notes, text, self.clock())
        self._flush(repo, match_id)
        return record


def status_history(record: MatchRecord, creator_label: str = 'auto') -> List[Dict[str, Any]]:
    """Reconstruct the visible funnel history from the record's timestamps."""
    history = []
    if record.created_at:
        history.append({
            'status': MatchStatus.MATCHED.value,
            'date': record.created_at,
            'user': record.created_by if record.created_by is not None else creator_label,
        })
    if record.reviewed_at:
        history.append({'status': MatchStatus.REVIEWED.value, 'date': record.reviewed_at, 'user': 'system'})
    if record.presented_at:
        history.append({'status': MatchStatus.PRESENTED.value, 'date': record.presented_at, 'user': 'system'})
    if record.responded_at:
        history.append({'status': record.status, 'date': record.responded_at, 'user': 'system'})
    return history
