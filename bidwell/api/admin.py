"""
Admin API Routes - auction management for an organization
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bidwell.core.config import Settings
from bidwell.core.database import get_db
from bidwell.core.dependencies import get_app_settings, require_admin
from bidwell.models import User
from bidwell.schemas import AddItemRequest, CreateAuctionRequest, StatusChangeRequest
from bidwell.services import AuctionService, CatalogService

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/dashboard")
def dashboard(
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Auctions, items, bids and totals of the admin's organization"""
    return AuctionService.org_dashboard(db, admin.org_id, settings.BID_INCREMENT_CENTS)


@router.post("/auctions", status_code=201)
def create_auction(
    body: CreateAuctionRequest,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    auction = AuctionService.create_auction(
        db,
        org_id=admin.org_id,
        name=body.name,
        description=body.description,
        ends_at=body.ends_at,
        status=body.status,
    )
    return {"success": True, "auction": auction.to_dict()}


@router.post("/auctions/{auction_id}/items", status_code=201)
def add_item(
    auction_id: str,
    body: AddItemRequest,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    item = AuctionService.add_item(
        db,
        org_id=admin.org_id,
        auction_id=auction_id,
        title=body.title,
        description=body.description,
        image_url=body.image_url,
        starting_bid=body.starting_bid,
    )
    stats = CatalogService.item_stats(db, item.id)
    return {"success": True, "item": CatalogService.item_view(item, stats, settings.BID_INCREMENT_CENTS)}


@router.post("/auctions/{auction_id}/status")
def change_status(
    auction_id: str,
    body: StatusChangeRequest,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    auction = AuctionService.set_status(db, admin.org_id, auction_id, body.status)
    return {"success": True, "auction": auction.to_dict()}
