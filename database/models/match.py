from datetime import date
from typing import Optional

from sqlalchemy import Column, Integer, Text, ForeignKey, Numeric, UniqueConstraint, Index
from sqlalchemy.orm import relationship

from .base import Base, UTCDateTime, utc_now


class MatchRecord(Base):
    """
    One scored (listing, prospect) pair and its funnel state.

    Tracks:
    - Generation score and the human-readable reason
    - Funnel status with reviewed/presented/responded timestamps
    - Append-only notes log
    - Optimistic version counter guarding concurrent transitions
    """
    __tablename__ = 'match_record'

    id = Column(Integer, primary_key=True, autoincrement=True)
    listing_id = Column(Integer, ForeignKey('listing.id', ondelete='CASCADE'), nullable=False)
    prospect_id = Column(Integer, ForeignKey('prospect.id', ondelete='CASCADE'), nullable=False)

    score = Column(Numeric(5, 2), nullable=False, default=0)
    reason = Column(Text, nullable=True)

    status = Column(Text, nullable=False, default='matched')
    reviewed_at = Column(UTCDateTime, nullable=True)
    presented_at = Column(UTCDateTime, nullable=True)
    responded_at = Column(UTCDateTime, nullable=True)
    response_comment = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)

    created_by = Column(Integer, nullable=True)
    created_at = Column(UTCDateTime, nullable=False, default=utc_now)
    updated_at = Column(UTCDateTime, nullable=False, default=utc_now, onupdate=utc_now)

    version = Column(Integer, nullable=False)

    listing = relationship("Listing", back_populates="matches")
    prospect = relationship("Prospect", back_populates="matches")

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        UniqueConstraint('listing_id', 'prospect_id', name='uq_match_record_listing_prospect'),
        Index('idx_match_record_prospect_score', 'prospect_id', 'score'),
        Index('idx_match_record_listing_score', 'listing_id', 'score'),
        Index('idx_match_record_status', 'status'),
        Index('idx_match_record_presented', 'presented_at'),
    )

    @property
    def score_level(self) -> str:
        score = float(self.score or 0)
        if score >= 90:
            return 'excellent'
        elif score >= 80:
            return 'very_good'
        elif score >= 70:
            return 'good'
        elif score >= 60:
            return 'fair'
        return 'poor'

    def days_since_presented(self, today: date) -> Optional[int]:
        if not self.presented_at:
            return None
        return (today - self.presented_at.date()).days

    @property
    def days_to_response(self) -> Optional[int]:
        if not self.presented_at or not self.responded_at:
            return None
        return (self.responded_at.date() - self.presented_at.date()).days
