"""
Auction Service - Business Logic

Handles:
- Auction creation and status transitions
- Adding items to auctions
- The organization dashboard
"""
import logging
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from bidwell.core.timeutils import utcnow
from bidwell.models import MAX_AMOUNT_CENTS, Auction, AuctionItem, AuctionStatus
from bidwell.services.catalog_service import CatalogService
from bidwell.services.errors import (
    AuctionNotFoundError,
    InvalidStatusTransitionError,
    ValidationError,
)

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS = {
    AuctionStatus.DRAFT: {AuctionStatus.ACTIVE, AuctionStatus.COMPLETED},
    AuctionStatus.ACTIVE: {AuctionStatus.COMPLETED},
    AuctionStatus.COMPLETED: set(),
}


def parse_status(value) -> AuctionStatus:
    try:
        return AuctionStatus(value)
    except ValueError:
        raise ValidationError(f"Unknown auction status: {value}", fields={"status": "invalid"})


class AuctionService:
    """
    Service for auction administration

    Every operation is scoped to the admin's organization; an auction of
    another organization is reported as not found.
    """

    @staticmethod
    def get_org_auction(db: Session, org_id: str, auction_id: str) -> Auction:
        auction = db.get(Auction, auction_id)
        if auction is None or auction.org_id != org_id:
            raise AuctionNotFoundError(auction_id)
        return auction

    @staticmethod
    def create_auction(
        db: Session,
        org_id: str,
        name: str,
        description: Optional[str],
        ends_at: Optional[datetime],
        status=AuctionStatus.DRAFT,
        now: Optional[datetime] = None,
    ) -> Auction:
        """
        Create a new auction

        Business rules:
        - Name is required
        - End time must be in the future
        - New auctions start as draft or active

        Raises:
            ValidationError: If validation fails
        """
        now = now or utcnow()
        status = parse_status(status)

        errors = {}
        if not (name or "").strip():
            errors["name"] = "is required"
        if ends_at is None:
            errors["endsAt"] = "is required"
        elif ends_at <= now:
            errors["endsAt"] = "must be in the future"
        if status == AuctionStatus.COMPLETED:
            errors["status"] = "must be draft or active"
        if errors:
            raise ValidationError("Invalid auction", fields=errors)

        auction = Auction(
            org_id=org_id,
            name=name.strip(),
            description=(description or "").strip() or None,
            ends_at=ends_at,
            status=status,
            created_at=now,
            updated_at=now,
        )
        db.add(auction)
        db.commit()

        logger.info("Auction created", extra={"auction_id": auction.id, "org_id": org_id})
        return auction

    @staticmethod
    def add_item(
        db: Session,
        org_id: str,
        auction_id: str,
        title: str,
        description: Optional[str],
        image_url: Optional[str],
        starting_bid,
    ) -> AuctionItem:
        """
        Add an item to one of the organization's auctions

        Raises:
            AuctionNotFoundError: auction missing or owned by another org
            ValidationError: blank title or non-positive starting bid
        """
        auction = AuctionService.get_org_auction(db, org_id, auction_id)

        errors = {}
        if not (title or "").strip():
            errors["title"] = "is required"
        if isinstance(starting_bid, bool) or not isinstance(starting_bid, int) or starting_bid <= 0:
            errors["startingBid"] = "must be a positive number of cents"
        elif starting_bid > MAX_AMOUNT_CENTS:
            errors["startingBid"] = "is too large"
        if errors:
            raise ValidationError("Invalid item", fields=errors)

        item = AuctionItem(
            auction_id=auction.id,
            title=title.strip(),
            description=(description or "").strip() or None,
            image_url=image_url or None,
            starting_bid=starting_bid,
        )
        db.add(item)
        db.commit()

        logger.info("Item added", extra={"auction_id": auction.id, "item_id": item.id})
        return item

    @staticmethod
    def set_status(db: Session, org_id: str, auction_id: str, status) -> Auction:
        """
        Move an auction along draft -> active -> completed

        Raises:
            InvalidStatusTransitionError: transition not allowed
        """
        auction = AuctionService.get_org_auction(db, org_id, auction_id)
        target = parse_status(status)

        if target not in ALLOWED_TRANSITIONS[auction.status]:
            raise InvalidStatusTransitionError(
                f"Cannot change auction from {auction.status.value} to {target.value}"
            )

        auction.status = target
        db.commit()

        logger.info(
            f"Auction moved to {target.value}",
            extra={"auction_id": auction.id, "org_id": org_id},
        )
        return auction

    @staticmethod
    def org_dashboard(db: Session, org_id: str, increment: int = 1, now: Optional[datetime] = None) -> Dict:
        """
        Auctions of an organization with items, bid histories and totals

        Totals:
        - total_raised: sum of current bids of items in non-draft auctions
        - active_auctions / total_auctions
        - total_bids: across all items
        """
        now = now or utcnow()
        auctions = CatalogService.list_auctions(db, org_id=org_id)

        auction_views: List[Dict] = []
        total_raised = 0
        total_bids = 0
        for auction in auctions:
            items = CatalogService.auction_items_view(db, auction.id, increment)
            for item in items:
                item["bids"] = CatalogService.bid_history(db, item["id"]) if item["bidsCount"] else []
                total_bids += item["bidsCount"]
                if auction.status != AuctionStatus.DRAFT:
                    total_raised += item["currentBid"]

            view = CatalogService.auction_view(auction, now)
            view["items"] = items
            auction_views.append(view)

        organization = CatalogService.get_organization(db, org_id)
        return {
            "organization": organization.to_dict() if organization else None,
            "auctions": auction_views,
            "stats": {
                "totalRaised": total_raised,
                "activeAuctions": sum(1 for a in auctions if a.status == AuctionStatus.ACTIVE),
                "totalAuctions": len(auctions),
                "totalBids": total_bids,
            },
        }
