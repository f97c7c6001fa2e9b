#!/usr/bin/env python3
"""
Match funnel states.

Full funnel:
    matched -> reviewed -> presented -> interested | not_interested | rejected
            -> contracted (won) | expired / rejected (closed)

Bulk workflows use the simplified subset
    matched -> presented -> interested | rejected -> contracted
"""
from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple

from core.exceptions import ValidationError


class MatchStatus(str, Enum):
    MATCHED = 'matched'
    REVIEWED = 'reviewed'
    PRESENTED = 'presented'
    INTERESTED = 'interested'
    NOT_INTERESTED = 'not_interested'
    REJECTED = 'rejected'
    CONTRACTED = 'contracted'
    EXPIRED = 'expired'

    @classmethod
    def parse(cls, value) -> 'MatchStatus':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValidationError(f"Unknown match status: {value!r}") from None


TERMINAL_STATES: FrozenSet[MatchStatus] = frozenset({MatchStatus.CONTRACTED, MatchStatus.EXPIRED})

SIMPLIFIED_FUNNEL: Tuple[MatchStatus, ...] = (
    MatchStatus.MATCHED,
    MatchStatus.PRESENTED,
    MatchStatus.INTERESTED,
    MatchStatus.REJECTED,
    MatchStatus.CONTRACTED,
)

RESPONSE_STATES: FrozenSet[MatchStatus] = frozenset({
    MatchStatus.INTERESTED,
    MatchStatus.NOT_INTERESTED,
    MatchStatus.REJECTED,
    MatchStatus.CONTRACTED,
})

# Timestamp column stamped on entering each state
TIMESTAMP_FIELDS: Dict[MatchStatus, str] = {
    MatchStatus.REVIEWED: 'reviewed_at',
    MatchStatus.PRESENTED: 'presented_at',
    **{status: 'responded_at' for status in RESPONSE_STATES},
}


def is_terminal(status) -> bool:
    try:
        return MatchStatus.parse(status) in TERMINAL_STATES
    except ValidationError:
        return False


def timestamp_field(status: MatchStatus) -> Optional[str]:
    return TIMESTAMP_FIELDS.get(status)
