"""Property ORM Model"""

import uuid

from sqlalchemy import JSON, Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ...db.models import Base


class PropertyModel(Base):
    __tablename__ = 'properties'

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(Uuid(as_uuid=True), ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)

    name = Column(String(255), nullable=False)
    type = Column(String(50), nullable=False, index=True)
    description = Column(Text, nullable=True)

    # Location
    location_street = Column(String(255), nullable=True)
    location_city = Column(String(100), nullable=True)
    location_state = Column(String(100), nullable=True)
    location_zipcode = Column(String(20), nullable=True)

    beds = Column(Integer, nullable=False)
    baths = Column(Integer, nullable=False)
    square_feet = Column(Integer, nullable=False)
    amenities = Column(JSON, nullable=False, default=list)

    # Rates
    rate_nightly = Column(Float, nullable=True)
    rate_weekly = Column(Float, nullable=True)
    rate_monthly = Column(Float, nullable=True)

    # Seller info
    seller_name = Column(String(255), nullable=True)
    seller_email = Column(String(320), nullable=True)
    seller_phone = Column(String(50), nullable=True)

    images = Column(JSON, nullable=False, default=list)
    is_featured = Column(Boolean, default=False, nullable=False, index=True)

    created_at = Column(DateTime, server_default=func.now(), index=True)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    owner = relationship('UserModel', back_populates='properties')

    def __repr__(self):
        return f"<Property(id={self.id}, name='{self.name}', owner_id={self.owner_id})>"
