from sqlalchemy import Column, Integer, Text, Index

from .base import Base, UTCDateTime, utc_now


class Activity(Base):
    """Audit trail entry for user and system actions on matches."""
    __tablename__ = 'activity'

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=True)

    # match_created|match_status_updated|match_note_added|presentation|contract
    activity_type = Column(Text, nullable=False)
    subject_type = Column(Text, nullable=False)  # listing|prospect|match
    subject_id = Column(Integer, nullable=False)

    title = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    occurred_at = Column(UTCDateTime, nullable=False, default=utc_now)

    __table_args__ = (
        Index('idx_activity_subject', 'subject_type', 'subject_id'),
        Index('idx_activity_type', 'activity_type'),
    )
