from datetime import date
from typing import Optional

from sqlalchemy import Column, Integer, Numeric, Text, Index, func
from sqlalchemy.orm import relationship

from .base import Base, UTCDateTime


class Listing(Base):
    """A property offered for sale. Read-only to the matching core except for `status`."""
    __tablename__ = 'listing'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False, default='')
    category = Column(Text, nullable=False)

    # 10,000-yen units
    price = Column(Integer, nullable=False)

    # Square metres
    land_area = Column(Numeric(10, 2), nullable=True)
    building_area = Column(Numeric(10, 2), nullable=True)

    yield_rate = Column(Numeric(5, 2), nullable=True)

    region = Column(Text, nullable=False, default='')
    locality = Column(Text, nullable=False, default='')
    address = Column(Text, nullable=False, default='')

    station_name = Column(Text, nullable=True)
    walk_minutes = Column(Integer, nullable=True)
    structure = Column(Text, nullable=True)
    construction_year = Column(Integer, nullable=True)
    remarks = Column(Text, nullable=True)

    status = Column(Text, nullable=False, default='available')  # available|reserved|sold|suspended

    created_at = Column(UTCDateTime, nullable=False, server_default=func.now())
    updated_at = Column(UTCDateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    matches = relationship("MatchRecord", back_populates="listing")

    __table_args__ = (
        Index('idx_listing_status', 'status'),
        Index('idx_listing_category', 'category'),
        Index('idx_listing_price', 'price'),
    )

    @property
    def full_address(self) -> str:
        return f"{self.region or ''}{self.locality or ''}{self.address or ''}"

    def building_age(self, today: date) -> Optional[int]:
        if not self.construction_year:
            return None
        return today.year - self.construction_year
