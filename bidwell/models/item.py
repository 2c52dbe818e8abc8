"""
Auction item model

The current bid is not a column: it is derived from the bids table at read
time (see bidwell.services.catalog_service).
"""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from bidwell.core.database import Base
from bidwell.core.timeutils import utcnow
from bidwell.models.base import new_id


class AuctionItem(Base):
    __tablename__ = "auction_items"

    id = Column(String(64), primary_key=True, default=new_id)
    auction_id = Column(String(64), ForeignKey("auctions.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    # Plain URL or a base64 data: URL from an upload
    image_url = Column(Text)
    starting_bid = Column(Integer, nullable=False)  # cents
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    auction = relationship("Auction", back_populates="items")
    bids = relationship("Bid", back_populates="item")

    def __repr__(self):
        return f"<AuctionItem(id={self.id!r}, title={self.title!r}, starting_bid={self.starting_bid})>"
