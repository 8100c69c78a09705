"""Billing domain schemas"""

from typing import Optional

from pydantic import BaseModel, field_validator


class CheckoutRequest(BaseModel):
    """Setup fee plus subscription checkout"""

    setup_price_id: str
    subscription_price_id: str
    tier_name: Optional[str] = None

    @field_validator("setup_price_id", "subscription_price_id")
    @classmethod
    def validate_price_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Price id is required")
        return v


class CheckoutResponse(BaseModel):
    url: str
