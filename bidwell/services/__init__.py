"""
Business Logic Services
"""
from bidwell.services.auction_service import AuctionService
from bidwell.services.auth_service import AuthService
from bidwell.services.bid_service import BidService
from bidwell.services.catalog_service import CatalogService, ItemStats
from bidwell.services.verification_service import DepositForm, VerificationResult, VerificationService

__all__ = [
    "AuctionService",
    "AuthService",
    "BidService",
    "CatalogService",
    "ItemStats",
    "DepositForm",
    "VerificationResult",
    "VerificationService",
]
