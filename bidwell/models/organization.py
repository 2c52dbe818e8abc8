"""
Organization model
"""
from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.orm import relationship

from bidwell.core.database import Base
from bidwell.core.timeutils import utcnow
from bidwell.models.base import new_id


class Organization(Base):
    """An organization running one or more auctions"""

    __tablename__ = "organizations"

    id = Column(String(64), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    logo_url = Column(String(500))
    created_at = Column(DateTime, default=utcnow, nullable=False)

    auctions = relationship("Auction", back_populates="organization")
    members = relationship("User", back_populates="organization")

    def __repr__(self):
        return f"<Organization(id={self.id!r}, name={self.name!r})>"

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "logo_url": self.logo_url,
        }
