from .base import Base, UTCDateTime, utc_now
from .listing import Listing
from .prospect import Prospect, PreferenceRule
from .match import MatchRecord
from .activity import Activity

__all__ = [
    'Base',
    'UTCDateTime',
    'utc_now',
    'Listing',
    'Prospect',
    'PreferenceRule',
    'MatchRecord',
    'Activity',
]
