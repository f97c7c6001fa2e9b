from typing import List

from sqlalchemy import Column, Integer, Numeric, Text, ForeignKey, Index, func
from sqlalchemy.orm import relationship

from .base import Base, UTCDateTime


class Prospect(Base):
    """A buyer or lessee with stated requirements."""
    __tablename__ = 'prospect'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False, default='')

    # Comma-joined listing categories; NULL or empty means no preference
    category_preference = Column(Text, nullable=True)

    budget_min = Column(Integer, nullable=True)
    budget_max = Column(Integer, nullable=True)

    area_preference = Column(Text, nullable=True)
    yield_requirement = Column(Numeric(5, 2), nullable=True)
    # Required building area in square metres
    area_requirement = Column(Numeric(10, 2), nullable=True)

    remarks = Column(Text, nullable=True)
    detailed_requirements = Column(Text, nullable=True)

    status = Column(Text, nullable=False, default='active')  # active|negotiating|closed|suspended

    created_at = Column(UTCDateTime, nullable=False, server_default=func.now())
    updated_at = Column(UTCDateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    preference_rules = relationship(
        "PreferenceRule",
        back_populates="prospect",
        cascade="all, delete-orphan",
        order_by="PreferenceRule.id",
    )
    matches = relationship("MatchRecord", back_populates="prospect")

    __table_args__ = (
        Index('idx_prospect_status', 'status'),
    )

    @property
    def accepted_categories(self) -> List[str]:
        if not self.category_preference:
            return []
        return [c.strip() for c in self.category_preference.split(',') if c.strip()]


class PreferenceRule(Base):
    """A typed, prioritised condition attached to a prospect."""
    __tablename__ = 'preference_rule'

    id = Column(Integer, primary_key=True, autoincrement=True)
    prospect_id = Column(Integer, ForeignKey('prospect.id', ondelete='CASCADE'), nullable=False)

    rule_type = Column(Text, nullable=False)  # area|transit|structure|age|yield|size|other
    rule_key = Column(Text, nullable=False, default='')
    value = Column(Text, nullable=False)
    priority = Column(Text, nullable=False, default='want')  # must|want|nice_to_have

    created_at = Column(UTCDateTime, nullable=False, server_default=func.now())

    prospect = relationship("Prospect", back_populates="preference_rules")

    __table_args__ = (
        Index('idx_preference_rule_prospect_type', 'prospect_id', 'rule_type'),
    )
