#!/usr/bin/env python3
"""
Preference rule vocabulary.
"""
from enum import Enum
from typing import Optional


class PreferenceType(str, Enum):
    AREA = 'area'
    TRANSIT = 'transit'
    STRUCTURE = 'structure'
    AGE = 'age'
    YIELD = 'yield'
    SIZE = 'size'
    OTHER = 'other'

    @classmethod
    def parse(cls, value: Optional[str]) -> 'PreferenceType':
        """Map a stored rule type to a member; 'station' is the legacy name for transit."""
        if not value:
            return cls.OTHER
        normalized = value.strip().lower()
        if normalized == 'station':
            return cls.TRANSIT
        try:
            return cls(normalized)
        except ValueError:
            return cls.OTHER


class Priority(str, Enum):
    MUST = 'must'
    WANT = 'want'
    NICE_TO_HAVE = 'nice_to_have'

    @property
    def weight(self) -> float:
        return PRIORITY_WEIGHTS[self]

    @classmethod
    def weight_of(cls, value: Optional[str]) -> float:
        try:
            return cls(value).weight
        except ValueError:
            return 1.0


PRIORITY_WEIGHTS = {
    Priority.MUST: 3.0,
    Priority.WANT: 2.0,
    Priority.NICE_TO_HAVE: 1.0,
}
