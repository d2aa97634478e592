"""Organization model: the tenant root that owns channels."""

from __future__ import annotations

from sqlalchemy import Boolean, Column, Integer, String
from sqlalchemy.orm import relationship

from app.db import Base
from app.models.mixins import JSONDocument, TimestampMixin


class Organization(Base, TimestampMixin):
    """Tenant. Soft-deleted by flipping is_active; rows are never removed."""

    __tablename__ = "organizations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    slug = Column(String(64), unique=True, nullable=False, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    extra = Column(
        "metadata", JSONDocument, nullable=True
    )  # DB column "metadata"; avoid shadowing Base.metadata

    channels = relationship("Channel", back_populates="organization")
