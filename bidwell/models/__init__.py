"""
SQLAlchemy models for the silent auction

Import all models here so they register with Base and relationships resolve.
"""
from bidwell.core.database import Base

from bidwell.models.base import MAX_AMOUNT_CENTS

from bidwell.models.organization import Organization
from bidwell.models.user import User, UserRole
from bidwell.models.auction import Auction, AuctionStatus
from bidwell.models.item import AuctionItem
from bidwell.models.bid import Bid

__all__ = [
    "Base",
    "MAX_AMOUNT_CENTS",
    "Organization",
    "User",
    "UserRole",
    "Auction",
    "AuctionStatus",
    "AuctionItem",
    "Bid",
]
