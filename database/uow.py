import contextlib
import logging

from sqlalchemy.exc import InterfaceError, OperationalError, TimeoutError as PoolTimeoutError

from core.exceptions import TransientStoreError
from database.database import SessionLocal, get_engine
from database.repository import MatchmakerRepository

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def match_uow(session_factory=None):
    """Per-unit-of-work transaction scope.

    Yields a MatchmakerRepository bound to a fresh Session. Commits on success,
    rolls back on exception, always closes. Connectivity failures surface as
    TransientStoreError so callers can retry the whole unit.

    Usage:
        with match_uow() as repo:
            record = repo.matches.get(match_id)
            # perform operations...
        # commit happens automatically on successful exit
    """
    if session_factory is None:
        get_engine()
        session_factory = SessionLocal
    session = session_factory()
    try:
        repo = MatchmakerRepository(session)
        yield repo
        session.commit()
    except (OperationalError, InterfaceError, PoolTimeoutError) as e:
        session.rollback()
        logger.warning(f"Store call failed, transaction rolled back: {e}")
        raise TransientStoreError(str(e)) from e
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
