"""
Vendor and venue listing models.
"""

from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey

from eventplanning.models.base import Base, utcnow


class Vendor(Base):
    """Service provider listed by a vendor account."""

    __tablename__ = "vendors"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), nullable=False, index=True)
    category = Column(String(100), nullable=True, index=True)
    address = Column(String(255), nullable=True)
    email = Column(String(100), nullable=True)
    phone = Column(String(30), nullable=True)
    description = Column(Text, nullable=True)
    approved = Column(Boolean, default=False, nullable=False)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    def __repr__(self):
        return f"<Vendor(id={self.id}, name='{self.name}', approved={self.approved})>"


class Venue(Base):
    """Physical location events can be held at."""

    __tablename__ = "venues"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), nullable=False, index=True)
    address = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    capacity = Column(Integer, nullable=True)
    approved = Column(Boolean, default=False, nullable=False)
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    def __repr__(self):
        return f"<Venue(id={self.id}, name='{self.name}', approved={self.approved})>"
