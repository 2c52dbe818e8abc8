"""
Public HTML pages

Handles:
- Auction listing and the bidding gallery
- Login / signup / logout forms
- Deposit verification and bid forms

Modal state (which bid form or the verify form is open) is carried in the
query string, e.g. /auctions/{id}?bid=<item_id> or ?verify=1.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Form, Request
from sqlalchemy.orm import Session

from bidwell.core.config import Settings
from bidwell.core.database import get_db
from bidwell.core.dependencies import (
    get_app_settings,
    get_current_user,
    get_password_hasher,
    get_session_manager,
    get_verified_auctions,
    get_verified_name,
)
from bidwell.core.security import PasswordHasher, SessionManager
from bidwell.core.timeutils import format_cents
from bidwell.models import AuctionStatus, User
from bidwell.services import (
    AuthService,
    BidService,
    CatalogService,
    DepositForm,
    VerificationService,
)
from bidwell.services.errors import BidWellError, NotFoundError, VerificationError
from bidwell.api.templating import dollars_to_cents, redirect, safe_next, templates

logger = logging.getLogger(__name__)

router = APIRouter(tags=["pages"], include_in_schema=False)

DASHBOARD_PATH = "/admin/auctions-dashboard"


@router.get("/")
def index(request: Request, db: Session = Depends(get_db), user: Optional[User] = Depends(get_current_user)):
    auctions = CatalogService.list_auctions(db, status=AuctionStatus.ACTIVE)
    return templates.TemplateResponse(
        request,
        "index.html",
        {"auctions": [CatalogService.auction_view(a) for a in auctions], "user": user},
    )


# ============================================================================
# LOGIN / SIGNUP
# ============================================================================
@router.get("/login")
def login_page(request: Request, next: Optional[str] = None, error: Optional[str] = None):
    return templates.TemplateResponse(request, "login.html", {"next": next or "", "error": error, "email": ""})


@router.post("/login")
def login_submit(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    next: str = Form(""),
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    sessions: SessionManager = Depends(get_session_manager),
):
    try:
        user = AuthService.login(db, hasher, email, password)
    except BidWellError as e:
        return templates.TemplateResponse(
            request,
            "login.html",
            {"next": next, "error": e.message, "email": email},
            status_code=e.status_code,
        )

    default = DASHBOARD_PATH if user.is_admin else "/"
    response = redirect(safe_next(next, default))
    sessions.set_cookie(response, AuthService.payload_for(user))
    return response


@router.get("/signup")
def signup_page(request: Request, next: Optional[str] = None):
    return templates.TemplateResponse(request, "signup.html", {"next": next or "", "error": None, "form": {}})


@router.post("/signup")
def signup_submit(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    first_name: str = Form(""),
    last_name: str = Form(""),
    next: str = Form(""),
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    sessions: SessionManager = Depends(get_session_manager),
):
    try:
        user = AuthService.signup(db, hasher, email, password, first_name, last_name)
    except BidWellError as e:
        form = {"email": email, "first_name": first_name, "last_name": last_name}
        return templates.TemplateResponse(
            request,
            "signup.html",
            {"next": next, "error": e.message, "form": form},
            status_code=e.status_code,
        )

    response = redirect(safe_next(next, "/"))
    sessions.set_cookie(response, AuthService.payload_for(user))
    return response


@router.post("/logout")
def logout(sessions: SessionManager = Depends(get_session_manager)):
    response = redirect("/login")
    sessions.clear_cookie(response)
    return response


# ============================================================================
# GALLERY
# ============================================================================
def _render_gallery(
    request: Request,
    db: Session,
    settings: Settings,
    auction_id: str,
    user: Optional[User],
    verified: List[str],
    bidder_name: str,
    **context,
):
    try:
        detail = CatalogService.auction_detail(db, auction_id, settings.BID_INCREMENT_CENTS)
    except NotFoundError:
        return templates.TemplateResponse(request, "not_found.html", {"user": user}, status_code=404)

    for item in detail["items"]:
        item["bids"] = CatalogService.bid_history(db, item["id"], limit=5) if item["bidsCount"] else []

    is_verified = auction_id in verified
    selected = context.pop("selected_item", None)
    selected_item = next((i for i in detail["items"] if i["id"] == selected), None)

    status_code = context.pop("status_code", 200)
    return templates.TemplateResponse(
        request,
        "gallery.html",
        {
            **detail,
            "user": user,
            "is_verified": is_verified,
            "bidder_name": bidder_name,
            "selected_item": selected_item,
            "verify_errors": {},
            "deposit": {},
            **context,
        },
        status_code=status_code,
    )


@router.get("/auctions/{auction_id}")
def auction_gallery(
    request: Request,
    auction_id: str,
    bid: Optional[str] = None,
    verify: Optional[int] = None,
    message: Optional[str] = None,
    error: Optional[str] = None,
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_current_user),
    verified: List[str] = Depends(get_verified_auctions),
    bidder_name: str = Depends(get_verified_name),
    settings: Settings = Depends(get_app_settings),
):
    return _render_gallery(
        request,
        db,
        settings,
        auction_id,
        user,
        verified,
        bidder_name,
        selected_item=bid,
        show_verify=bool(verify) and auction_id not in verified,
        message=message,
        error=error,
    )


@router.post("/auctions/{auction_id}/verify")
def verify_submit(
    request: Request,
    auction_id: str,
    name: str = Form(""),
    email: str = Form(""),
    card_number: str = Form(""),
    expiry: str = Form(""),
    cvc: str = Form(""),
    agreed: bool = Form(False),
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_current_user),
    verified: List[str] = Depends(get_verified_auctions),
    bidder_name: str = Depends(get_verified_name),
    sessions: SessionManager = Depends(get_session_manager),
    settings: Settings = Depends(get_app_settings),
):
    try:
        CatalogService.get_public_auction(db, auction_id)
    except NotFoundError:
        return templates.TemplateResponse(request, "not_found.html", {"user": user}, status_code=404)

    form = DepositForm(name=name, email=email, card_number=card_number, expiry=expiry, cvc=cvc, agreed=agreed)
    try:
        result = VerificationService.verify_deposit(form)
    except VerificationError as e:
        logger.info("Deposit verification rejected", extra={"auction_id": auction_id})
        return _render_gallery(
            request,
            db,
            settings,
            auction_id,
            user,
            verified,
            bidder_name,
            show_verify=True,
            verify_errors=e.fields,
            deposit={"name": name, "email": email},
            error=e.message,
            status_code=e.status_code,
        )

    response = redirect(f"/auctions/{auction_id}", message="You're verified. Bidding is unlocked.")
    sessions.set_verification_cookie(response, result.name, [*verified, auction_id])
    return response


@router.post("/auctions/{auction_id}/items/{item_id}/bid")
def bid_submit(
    auction_id: str,
    item_id: str,
    amount: str = Form(""),
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_current_user),
    verified: List[str] = Depends(get_verified_auctions),
    settings: Settings = Depends(get_app_settings),
):
    gallery = f"/auctions/{auction_id}"
    if user is None:
        return redirect("/login", next=gallery)
    if auction_id not in verified:
        return redirect(gallery, verify=1, error="Verify to bid")

    try:
        item = CatalogService.get_item(db, item_id)
        if item.auction_id != auction_id:
            raise NotFoundError(f"Item {item_id} not found")
        bid = BidService.place_bid(
            db,
            item_id=item_id,
            user_id=user.id,
            amount=dollars_to_cents(amount),
            increment=settings.BID_INCREMENT_CENTS,
        )
    except BidWellError as e:
        return redirect(gallery, bid=item_id, error=e.message)

    return redirect(gallery, message=f"Bid placed! Your bid of {format_cents(bid.amount)} is now the highest")
