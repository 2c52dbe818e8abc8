"""
Bid Service - Business Logic

Handles:
- Bid validation
- Bid placement (read current high bid + insert in one transaction)
"""
import logging
import time
from datetime import datetime
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from bidwell.core import metrics
from bidwell.core.timeutils import utcnow
from bidwell.models import MAX_AMOUNT_CENTS, Auction, AuctionItem, AuctionStatus, Bid, User
from bidwell.services.errors import (
    AuctionClosedError,
    BidTooLowError,
    BidWellError,
    InvalidBidError,
    ItemNotFoundError,
    NotFoundError,
    UserNotFoundError,
)

logger = logging.getLogger(__name__)


def _reject_reason(exc: BidWellError) -> str:
    if isinstance(exc, BidTooLowError):
        return "too_low"
    if isinstance(exc, AuctionClosedError):
        return "closed"
    if isinstance(exc, NotFoundError):
        return "not_found"
    return "invalid"


class BidService:
    """
    Service for bid acceptance

    A bid is accepted only when it is at least the starting bid (first bid)
    or beats the current high bid by the configured increment.
    """

    @staticmethod
    def validate_amount(amount) -> int:
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise InvalidBidError("Bid amount must be a whole number of cents", fields={"amount": "must be an integer"})
        if amount <= 0:
            raise InvalidBidError("Bid amount must be positive", fields={"amount": "must be positive"})
        if amount > MAX_AMOUNT_CENTS:
            raise InvalidBidError("Bid amount is too large", fields={"amount": "too large"})
        return amount

    @staticmethod
    def place_bid(
        db: Session,
        item_id: str,
        user_id: str,
        amount: int,
        increment: int = 1,
        now: Optional[datetime] = None,
    ) -> Bid:
        """
        Place a bid

        The item row is read FOR UPDATE (SQLite runs every transaction as
        BEGIN IMMEDIATE), so concurrent bids on one item are serialized and
        each is judged against the bids committed before it.

        Args:
            db: Database session
            item_id: Item ID
            user_id: Bidder's user ID
            amount: Bid amount in cents
            increment: Minimum raise over the current high bid
            now: Clock override

        Returns:
            The persisted bid

        Raises:
            InvalidBidError: amount is not a positive integer
            ItemNotFoundError / UserNotFoundError: unknown IDs
            AuctionClosedError: auction not active or past its end time
            BidTooLowError: amount below the minimum next bid
        """
        start = time.perf_counter()
        now = now or utcnow()

        try:
            BidService.validate_amount(amount)

            item = db.execute(
                select(AuctionItem).where(AuctionItem.id == item_id).with_for_update()
            ).scalar_one_or_none()
            if item is None:
                raise ItemNotFoundError(item_id)

            auction = db.get(Auction, item.auction_id)
            if not auction.is_open(now):
                status = auction.status.value if auction.status != AuctionStatus.ACTIVE else "ended"
                raise AuctionClosedError(auction.id, status)

            if db.get(User, user_id) is None:
                raise UserNotFoundError(user_id)

            highest, count = db.execute(
                select(func.max(Bid.amount), func.count(Bid.id)).where(Bid.item_id == item_id)
            ).one()

            if count == 0:
                current_bid, minimum = item.starting_bid, item.starting_bid
            else:
                current_bid, minimum = highest, highest + increment

            if amount < minimum:
                raise BidTooLowError(current_bid=current_bid, minimum=minimum)

            bid = Bid(item_id=item_id, user_id=user_id, amount=amount, created_at=now)
            db.add(bid)
            db.commit()

        except BidWellError as e:
            db.rollback()
            reason = _reject_reason(e)
            metrics.bids_rejected_total.labels(reason=reason).inc()
            logger.info(
                "Bid rejected",
                extra={"item_id": item_id, "user_id": user_id, "amount": amount, "reason": reason},
            )
            raise
        except Exception:
            db.rollback()
            raise
        finally:
            metrics.bid_acceptance_duration_seconds.observe(time.perf_counter() - start)

        metrics.bids_placed_total.inc()
        logger.info(
            "Bid accepted",
            extra={"bid_id": bid.id, "item_id": item_id, "user_id": user_id, "amount": amount},
        )
        return bid
