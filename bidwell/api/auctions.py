"""
Auction API Routes - public catalog and bidding
"""
from typing import List

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from bidwell.core.config import Settings
from bidwell.core.database import get_db
from bidwell.core.dependencies import (
    get_app_settings,
    get_session_manager,
    get_verified_auctions,
    require_user,
)
from bidwell.core.security import SessionManager
from bidwell.models import AuctionStatus, User
from bidwell.schemas import DepositRequest, PlaceBidRequest
from bidwell.services import (
    BidService,
    CatalogService,
    DepositForm,
    VerificationService,
)
from bidwell.services.errors import VerificationRequiredError

router = APIRouter(prefix="/api", tags=["auctions"])


@router.get("/auctions")
def list_auctions(db: Session = Depends(get_db)):
    """Active auctions"""
    auctions = CatalogService.list_auctions(db, status=AuctionStatus.ACTIVE)
    return {
        "total": len(auctions),
        "auctions": [CatalogService.auction_view(a) for a in auctions],
    }


@router.get("/auctions/{auction_id}")
def get_auction(
    auction_id: str,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Auction with its items, current bids and bid counts"""
    return CatalogService.auction_detail(db, auction_id, settings.BID_INCREMENT_CENTS)


@router.get("/items/{item_id}")
def get_item(
    item_id: str,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    item = CatalogService.get_item(db, item_id)
    stats = CatalogService.item_stats(db, item_id)
    top = CatalogService.top_bid(db, item_id)
    return {
        "item": CatalogService.item_view(item, stats, settings.BID_INCREMENT_CENTS),
        "topBid": top.to_dict() if top else None,
    }


@router.get("/items/{item_id}/bids")
def get_item_bids(item_id: str, limit: int = 50, db: Session = Depends(get_db)):
    """
    Bid history for an item, newest first

    Args:
        item_id: Item ID
        limit: Maximum number of bids to return
    """
    CatalogService.get_item(db, item_id)
    stats = CatalogService.item_stats(db, item_id)
    return {
        "item_id": item_id,
        "currentBid": stats.current_bid,
        "bidsCount": stats.bids_count,
        "bids": CatalogService.bid_history(db, item_id, limit=limit),
    }


@router.post("/auctions/{auction_id}/verify")
def verify_deposit(
    auction_id: str,
    body: DepositRequest,
    verified: List[str] = Depends(get_verified_auctions),
    db: Session = Depends(get_db),
    sessions: SessionManager = Depends(get_session_manager),
):
    """Validate the $1 deposit form and unlock bidding for the auction"""
    CatalogService.get_public_auction(db, auction_id)
    result = VerificationService.verify_deposit(
        DepositForm(
            name=body.name,
            email=body.email,
            card_number=body.card_number,
            expiry=body.expiry,
            cvc=body.cvc,
            agreed=body.agreed,
        )
    )

    response = JSONResponse(
        {"success": True, "verified": True, "bidderName": result.name, "cardLast4": result.card_last4}
    )
    sessions.set_verification_cookie(response, result.name, [*verified, auction_id])
    return response


@router.post("/items/{item_id}/bids", status_code=201)
def place_bid(
    item_id: str,
    body: PlaceBidRequest,
    user: User = Depends(require_user),
    verified: List[str] = Depends(get_verified_auctions),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Place a bid; answers 409 when the amount does not beat the current bid"""
    item = CatalogService.get_item(db, item_id)
    if item.auction_id not in verified:
        raise VerificationRequiredError()

    bid = BidService.place_bid(
        db,
        item_id=item_id,
        user_id=user.id,
        amount=body.amount,
        increment=settings.BID_INCREMENT_CENTS,
    )
    stats = CatalogService.item_stats(db, item_id)

    return {
        "success": True,
        "bid": bid.to_dict(),
        "currentBid": stats.current_bid,
        "bidsCount": stats.bids_count,
        "minimumBid": stats.minimum_next_bid(settings.BID_INCREMENT_CENTS),
    }
