from database.repositories.base import BaseRepository
from database.repositories.listing import ListingRepository
from database.repositories.prospect import ProspectRepository
from database.repositories.match import MatchRepository
from database.repositories.activity import ActivityRepository

__all__ = [
    'BaseRepository',
    'ListingRepository',
    'ProspectRepository',
    'MatchRepository',
    'ActivityRepository',
]
