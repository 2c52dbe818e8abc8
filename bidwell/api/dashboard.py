"""
Admin dashboard HTML routes

The /admin prefix is guarded by SessionGuardMiddleware; these handlers
additionally require the admin role. Drawer and expanded-row state live in
the query string: ?drawer=<auction_id>&expanded=<item_id>.
"""
import base64
import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from sqlalchemy.orm import Session

from bidwell.core.config import Settings
from bidwell.core.database import get_db
from bidwell.core.dependencies import get_app_settings, get_current_user
from bidwell.models import User
from bidwell.services import AuctionService
from bidwell.services.errors import BidWellError, ValidationError
from bidwell.api.templating import dollars_to_cents, redirect, templates

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin-pages"], include_in_schema=False)

DASHBOARD_PATH = "/admin/auctions-dashboard"
MAX_IMAGE_BYTES = 5 * 1024 * 1024


def _admin_or_none(user: Optional[User]) -> Optional[User]:
    if user is not None and user.is_admin and user.org_id:
        return user
    return None


def _parse_local_datetime(value: str) -> Optional[datetime]:
    """<input type="datetime-local"> value, e.g. 2026-04-01T18:30"""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise ValidationError("Invalid end date", fields={"endsAt": "use YYYY-MM-DDTHH:MM"})


def _image_data_url(image: Optional[UploadFile]) -> Optional[str]:
    """Uploaded image as a base64 data: URL"""
    if image is None or not image.filename:
        return None
    if not (image.content_type or "").startswith("image/"):
        raise ValidationError("Only image uploads are allowed", fields={"image": "not an image"})
    data = image.file.read(MAX_IMAGE_BYTES + 1)
    if len(data) > MAX_IMAGE_BYTES:
        raise ValidationError("Image is too large", fields={"image": "max 5 MB"})
    return f"data:{image.content_type};base64,{base64.b64encode(data).decode('ascii')}"


@router.get("/auctions-dashboard")
def auctions_dashboard(
    request: Request,
    drawer: Optional[str] = None,
    expanded: Optional[str] = None,
    message: Optional[str] = None,
    error: Optional[str] = None,
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_current_user),
    settings: Settings = Depends(get_app_settings),
):
    admin = _admin_or_none(user)
    if admin is None:
        return redirect("/login", next=DASHBOARD_PATH, error="Admin access required")

    dashboard = AuctionService.org_dashboard(db, admin.org_id, settings.BID_INCREMENT_CENTS)
    drawer_auction = next((a for a in dashboard["auctions"] if a["id"] == drawer), None)

    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            **dashboard,
            "user": admin,
            "drawer_auction": drawer_auction,
            "expanded": expanded,
            "message": message,
            "error": error,
        },
    )


@router.post("/auctions")
def create_auction(
    name: str = Form(""),
    description: str = Form(""),
    ends_at: str = Form(""),
    status: str = Form("draft"),
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_current_user),
):
    admin = _admin_or_none(user)
    if admin is None:
        return redirect("/login", next=DASHBOARD_PATH)

    try:
        auction = AuctionService.create_auction(
            db,
            org_id=admin.org_id,
            name=name,
            description=description,
            ends_at=_parse_local_datetime(ends_at),
            status=status,
        )
    except BidWellError as e:
        return redirect(DASHBOARD_PATH, error=e.message)

    return redirect(DASHBOARD_PATH, drawer=auction.id, message=f"Created {auction.name}")


@router.post("/auctions/{auction_id}/items")
def add_item(
    auction_id: str,
    title: str = Form(""),
    description: str = Form(""),
    starting_bid: str = Form(""),
    image_url: str = Form(""),
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_current_user),
):
    admin = _admin_or_none(user)
    if admin is None:
        return redirect("/login", next=DASHBOARD_PATH)

    try:
        image_data = _image_data_url(image) or image_url or None
        item = AuctionService.add_item(
            db,
            org_id=admin.org_id,
            auction_id=auction_id,
            title=title,
            description=description,
            image_url=image_data,
            starting_bid=dollars_to_cents(starting_bid, field="startingBid"),
        )
    except BidWellError as e:
        logger.info(f"Item form rejected: {e.message}", extra={"auction_id": auction_id, "org_id": admin.org_id})
        return redirect(DASHBOARD_PATH, drawer=auction_id, error=e.message)

    return redirect(DASHBOARD_PATH, message=f"Added {item.title}")


@router.post("/auctions/{auction_id}/status")
def change_status(
    auction_id: str,
    status: str = Form(...),
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_current_user),
):
    admin = _admin_or_none(user)
    if admin is None:
        return redirect("/login", next=DASHBOARD_PATH)

    try:
        auction = AuctionService.set_status(db, admin.org_id, auction_id, status)
    except BidWellError as e:
        return redirect(DASHBOARD_PATH, error=e.message)

    return redirect(DASHBOARD_PATH, message=f"{auction.name} is now {auction.status.value}")
