"""Pydantic schemas for bidding endpoints"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt


class PlaceBidRequest(BaseModel):
    """Amount in cents"""
    amount: Optional[StrictInt] = None


class DepositRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    email: str = ""
    card_number: str = Field("", alias="cardNumber")
    expiry: str = ""
    cvc: str = ""
    agreed: bool = False
