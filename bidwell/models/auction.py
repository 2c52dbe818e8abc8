"""
Auction model
"""
import enum

from sqlalchemy import Column, DateTime, Enum as SQLEnum, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from bidwell.core.database import Base
from bidwell.core.timeutils import utcnow
from bidwell.models.base import enum_values, new_id


class AuctionStatus(str, enum.Enum):
    """Auction status enum"""
    DRAFT = "draft"
    ACTIVE = "active"
    COMPLETED = "completed"


class Auction(Base):
    """Auction database model"""

    __tablename__ = "auctions"

    id = Column(String(64), primary_key=True, default=new_id)
    org_id = Column(String(64), ForeignKey("organizations.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    ends_at = Column(DateTime, nullable=False)
    status = Column(
        SQLEnum(AuctionStatus, native_enum=False, length=16, values_callable=enum_values),
        default=AuctionStatus.DRAFT,
        nullable=False,
        index=True,
    )
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    organization = relationship("Organization", back_populates="auctions")
    items = relationship("AuctionItem", back_populates="auction", order_by="AuctionItem.created_at")

    def __repr__(self):
        return f"<Auction(id={self.id!r}, name={self.name!r}, status={self.status})>"

    def is_open(self, now) -> bool:
        """Accepting bids: active and not past its end time"""
        return self.status == AuctionStatus.ACTIVE and self.ends_at > now

    def to_dict(self):
        """Convert to dictionary"""
        return {
            "id": self.id,
            "org_id": self.org_id,
            "name": self.name,
            "description": self.description,
            "ends_at": self.ends_at.isoformat() if self.ends_at else None,
            "status": self.status.value if isinstance(self.status, AuctionStatus) else self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
