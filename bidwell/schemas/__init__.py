"""
Pydantic request schemas
"""
from bidwell.schemas.auth import LoginRequest, SignupRequest
from bidwell.schemas.auction import AddItemRequest, CreateAuctionRequest, StatusChangeRequest
from bidwell.schemas.bid import DepositRequest, PlaceBidRequest

__all__ = [
    "LoginRequest",
    "SignupRequest",
    "AddItemRequest",
    "CreateAuctionRequest",
    "StatusChangeRequest",
    "DepositRequest",
    "PlaceBidRequest",
]
