"""
Bid model. Append-only: rows are never updated or deleted.
"""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from bidwell.core.database import Base
from bidwell.core.timeutils import utcnow
from bidwell.models.base import new_id


class Bid(Base):
    """Bid database model"""

    __tablename__ = "bids"

    id = Column(String(64), primary_key=True, default=new_id)
    item_id = Column(String(64), ForeignKey("auction_items.id"), nullable=False, index=True)
    user_id = Column(String(64), ForeignKey("users.id"), nullable=False, index=True)
    amount = Column(Integer, nullable=False)  # cents
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)

    item = relationship("AuctionItem", back_populates="bids")
    user = relationship("User", back_populates="bids")

    def __repr__(self):
        return f"<Bid(id={self.id!r}, item_id={self.item_id!r}, amount={self.amount})>"

    def to_dict(self):
        """Convert to dictionary"""
        return {
            "id": self.id,
            "item_id": self.item_id,
            "user_id": self.user_id,
            "amount": self.amount,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
