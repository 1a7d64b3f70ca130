"""User ORM Model"""

import uuid

from sqlalchemy import Boolean, Column, DateTime, String, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ...db.models import Base


class UserModel(Base):
    __tablename__ = 'users'

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    # Unique constraint is the source of truth for email conflicts
    email = Column(String(320), unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    name = Column(String(201), nullable=False)
    isadmin = Column(Boolean, default=False, nullable=False)
    isactive = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    properties = relationship('PropertyModel', back_populates='owner', passive_deletes=True)

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', isadmin={self.isadmin}, isactive={self.isactive})>"
