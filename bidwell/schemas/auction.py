"""Pydantic schemas for admin auction endpoints"""
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator


class CreateAuctionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    description: Optional[str] = None
    ends_at: datetime = Field(..., alias="endsAt")
    status: str = "draft"

    @field_validator("ends_at")
    @classmethod
    def to_naive_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v


class AddItemRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    description: Optional[str] = None
    image_url: Optional[str] = Field(None, alias="imageUrl")
    starting_bid: StrictInt = Field(..., alias="startingBid")


class StatusChangeRequest(BaseModel):
    status: str
