"""
Catalog Service - read side

Handles:
- Current bid / bid count projection per item
- Auction and item view models
- Bid history

The current bid is always computed from the bids table:
COALESCE(MAX(bids.amount), auction_items.starting_bid). Nothing is cached.
"""
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from bidwell.core.timeutils import time_remaining, utcnow
from bidwell.models import Auction, AuctionItem, AuctionStatus, Bid, Organization, User
from bidwell.services.errors import AuctionNotFoundError, ItemNotFoundError


@dataclass(frozen=True)
class ItemStats:
    """Derived bidding state of one item"""
    starting_bid: int
    current_bid: int
    bids_count: int

    def minimum_next_bid(self, increment: int = 1) -> int:
        if self.bids_count == 0:
            return self.starting_bid
        return self.current_bid + increment


class CatalogService:
    """Service for catalog reads and the current-bid projection"""

    @staticmethod
    def project_items(db: Session, item_ids: Iterable[str]) -> Dict[str, ItemStats]:
        """
        Current bid and bid count for a set of items in one grouped query

        Args:
            db: Database session
            item_ids: Item IDs; unknown IDs are left out of the result

        Returns:
            Mapping of item id to ItemStats
        """
        ids = list(dict.fromkeys(item_ids))
        if not ids:
            return {}

        stmt = (
            select(
                AuctionItem.id,
                AuctionItem.starting_bid,
                func.coalesce(func.max(Bid.amount), AuctionItem.starting_bid).label("current_bid"),
                func.count(Bid.id).label("bids_count"),
            )
            .select_from(AuctionItem)
            .outerjoin(Bid, Bid.item_id == AuctionItem.id)
            .where(AuctionItem.id.in_(ids))
            .group_by(AuctionItem.id, AuctionItem.starting_bid)
        )

        return {
            row.id: ItemStats(
                starting_bid=row.starting_bid,
                current_bid=row.current_bid,
                bids_count=row.bids_count,
            )
            for row in db.execute(stmt)
        }

    @staticmethod
    def item_stats(db: Session, item_id: str) -> ItemStats:
        stats = CatalogService.project_items(db, [item_id]).get(item_id)
        if stats is None:
            raise ItemNotFoundError(item_id)
        return stats

    @staticmethod
    def top_bid(db: Session, item_id: str) -> Optional[Bid]:
        """Highest bid; equal amounts go to the earliest bid"""
        stmt = (
            select(Bid)
            .where(Bid.item_id == item_id)
            .order_by(Bid.amount.desc(), Bid.created_at.asc(), Bid.id.asc())
            .limit(1)
        )
        return db.execute(stmt).scalar_one_or_none()

    @staticmethod
    def get_auction(db: Session, auction_id: str) -> Auction:
        auction = db.get(Auction, auction_id)
        if auction is None:
            raise AuctionNotFoundError(auction_id)
        return auction

    @staticmethod
    def get_item(db: Session, item_id: str) -> AuctionItem:
        item = db.get(AuctionItem, item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        return item

    @staticmethod
    def list_auctions(
        db: Session,
        status: Optional[AuctionStatus] = None,
        org_id: Optional[str] = None,
    ) -> List[Auction]:
        """Auctions newest first, optionally filtered by status and organization"""
        stmt = select(Auction)
        if status is not None:
            stmt = stmt.where(Auction.status == status)
        if org_id is not None:
            stmt = stmt.where(Auction.org_id == org_id)
        stmt = stmt.order_by(Auction.created_at.desc(), Auction.id)
        return list(db.execute(stmt).scalars())

    @staticmethod
    def item_view(item: AuctionItem, stats: ItemStats, increment: int = 1) -> Dict:
        return {
            "id": item.id,
            "auctionId": item.auction_id,
            "title": item.title,
            "description": item.description or "",
            "imageUrl": item.image_url,
            "startingBid": stats.starting_bid,
            "currentBid": stats.current_bid,
            "bidsCount": stats.bids_count,
            "minimumBid": stats.minimum_next_bid(increment),
        }

    @staticmethod
    def auction_items_view(db: Session, auction_id: str, increment: int = 1) -> List[Dict]:
        """Item view models of an auction, oldest item first"""
        items = list(
            db.execute(
                select(AuctionItem)
                .where(AuctionItem.auction_id == auction_id)
                .order_by(AuctionItem.created_at, AuctionItem.id)
            ).scalars()
        )
        stats = CatalogService.project_items(db, [item.id for item in items])
        return [CatalogService.item_view(item, stats[item.id], increment) for item in items]

    @staticmethod
    def auction_view(auction: Auction, now=None) -> Dict:
        now = now or utcnow()
        remaining = time_remaining(auction.ends_at, now)
        data = auction.to_dict()
        data.update(
            {
                "organization": auction.organization.name if auction.organization else None,
                "isLive": auction.is_open(now),
                "timeRemaining": remaining.label,
                "urgent": remaining.urgent,
            }
        )
        return data

    @staticmethod
    def get_public_auction(db: Session, auction_id: str) -> Auction:
        """Drafts are only visible to their organization"""
        auction = CatalogService.get_auction(db, auction_id)
        if auction.status == AuctionStatus.DRAFT:
            raise AuctionNotFoundError(auction_id)
        return auction

    @staticmethod
    def auction_detail(db: Session, auction_id: str, increment: int = 1) -> Dict:
        """Auction plus its items with derived bids"""
        auction = CatalogService.get_public_auction(db, auction_id)
        return {
            "auction": CatalogService.auction_view(auction),
            "items": CatalogService.auction_items_view(db, auction_id, increment),
        }

    @staticmethod
    def bid_history(db: Session, item_id: str, limit: int = 50) -> List[Dict]:
        """
        Bids on an item, newest first

        Args:
            db: Database session
            item_id: Item ID
            limit: Maximum results

        Returns:
            List of bid dicts with the bidder's display name
        """
        stmt = (
            select(Bid, User)
            .join(User, User.id == Bid.user_id)
            .where(Bid.item_id == item_id)
            .order_by(Bid.created_at.desc(), Bid.amount.desc())
            .limit(limit)
        )
        return [
            {
                "id": bid.id,
                "amount": bid.amount,
                "userId": bid.user_id,
                "bidderName": user.display_name,
                "createdAt": bid.created_at.isoformat(),
            }
            for bid, user in db.execute(stmt)
        ]

    @staticmethod
    def get_organization(db: Session, org_id: str) -> Optional[Organization]:
        return db.get(Organization, org_id)
