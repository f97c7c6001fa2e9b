import threading
from dataclasses import dataclass, field
from typing import Optional

from core.config_loader import AppConfig
from core.generator import PairGenerator
from core.lifecycle import MatchLifecycle
from core.match_service import MatchService
from core.scorer.service import ScoringService
from core.utils import Clock, utc_now
from notification.activity import ActivityLogger


@dataclass
class AppContext:
    """Application context container that holds all wired dependencies.

    Single source of truth for service instantiation. DB access is obtained
    via match_uow() inside each operation; nothing here holds a session.
    """
    config: AppConfig
    scoring: ScoringService
    generator: PairGenerator
    lifecycle: MatchLifecycle
    activity_logger: ActivityLogger
    match_service: MatchService
    cancel_event: threading.Event = field(default_factory=threading.Event)

    @classmethod
    def build(
        cls,
        config: AppConfig,
        session_factory=None,
        clock: Clock = utc_now,
        cancel_event: Optional[threading.Event] = None
    ) -> "AppContext":
        """Build an AppContext from config.

        Args:
            config: Loaded application configuration
            session_factory: Session factory; defaults to the configured SessionLocal
            clock: Time source for lifecycle stamps and building-age rules
            cancel_event: Set to stop a running generation at the next page boundary

        Returns:
            Fully wired AppContext instance (no DB session attached)
        """
        if session_factory is None:
            session_factory = cls._configure_database(config)

        cancel_event = cancel_event or threading.Event()

        scoring = ScoringService(config.scoring, clock=clock)
        activity_logger = ActivityLogger(session_factory)
        generator = PairGenerator(
            scoring,
            config=config.generation,
            session_factory=session_factory,
            activity_logger=activity_logger,
            cancel_event=cancel_event,
        )
        lifecycle = MatchLifecycle(clock=clock, note_max_length=config.lifecycle.note_max_length)
        match_service = MatchService(
            scoring,
            generator,
            lifecycle,
            activity_logger=activity_logger,
            session_factory=session_factory,
        )

        return cls(
            config=config,
            scoring=scoring,
            generator=generator,
            lifecycle=lifecycle,
            activity_logger=activity_logger,
            match_service=match_service,
            cancel_event=cancel_event,
        )

    @staticmethod
    def _configure_database(config: AppConfig):
        """Bind the module-level SessionLocal to an engine built from config."""
        from database.database import configure_database, SessionLocal

        configure_database(
            config.database.url,
            statement_timeout_ms=config.database.statement_timeout_ms,
            echo=config.database.echo,
        )
        return SessionLocal
