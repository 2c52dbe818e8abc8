"""
Service-layer exceptions

Each carries the HTTP status the API layer answers with.
"""
from typing import Dict, Optional

from bidwell.core.timeutils import format_cents


class BidWellError(Exception):
    """Base exception for service errors"""

    status_code = 400

    def __init__(self, message: str, fields: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.fields = fields or {}

    def to_dict(self) -> dict:
        body = {"success": False, "error": self.message}
        if self.fields:
            body["fields"] = self.fields
        return body


class ValidationError(BidWellError):
    """Missing or malformed input"""
    status_code = 400


class InvalidCredentialsError(BidWellError):
    status_code = 401

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message)


class NotAuthenticatedError(BidWellError):
    status_code = 401

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class PermissionDeniedError(BidWellError):
    status_code = 403


class VerificationRequiredError(PermissionDeniedError):
    def __init__(self, message: str = "Verify to bid"):
        super().__init__(message)


class VerificationError(ValidationError):
    """Deposit form rejected"""


class NotFoundError(BidWellError):
    status_code = 404


class ItemNotFoundError(NotFoundError):
    def __init__(self, item_id: str):
        super().__init__(f"Item {item_id} not found")


class AuctionNotFoundError(NotFoundError):
    def __init__(self, auction_id: str):
        super().__init__(f"Auction {auction_id} not found")


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: str):
        super().__init__(f"User {user_id} not found")


class ConflictError(BidWellError):
    status_code = 409


class DuplicateEmailError(ConflictError):
    def __init__(self, message: str = "Email already registered"):
        super().__init__(message)


class AuctionClosedError(ConflictError):
    def __init__(self, auction_id: str, status: str):
        super().__init__(f"Auction is {status} and not accepting bids")
        self.auction_id = auction_id


class InvalidStatusTransitionError(ConflictError):
    pass


class InvalidBidError(ValidationError):
    pass


class BidTooLowError(ConflictError):
    """Bid does not beat the current high bid"""

    def __init__(self, current_bid: int, minimum: int):
        super().__init__(f"Bid must be at least {format_cents(minimum)} (current bid is {format_cents(current_bid)})")
        self.current_bid = current_bid
        self.minimum = minimum

    def to_dict(self) -> dict:
        body = super().to_dict()
        body["currentBid"] = self.current_bid
        body["minimumBid"] = self.minimum
        return body
