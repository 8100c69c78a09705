"""Reservation domain schemas - Pydantic models for validation"""

from typing import Optional

from pydantic import BaseModel, field_validator


class ReservationWebhookRequest(BaseModel):
    """
    Reservation request sent by an n8n workflow (e.g. the phone assistant).

    Required fields are optional here so missing ones can be reported
    with the VALIDATION_ERROR code instead of a generic 422.
    """

    customer_name: Optional[str] = None
    reservation_date: Optional[str] = None  # DD.MM.YYYY or YYYY-MM-DD
    reservation_time: Optional[str] = None  # HH:MM
    staff_member_name: Optional[str] = None
    party_size: Optional[int] = None
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None
    notes: Optional[str] = None
    source: Optional[str] = None

    @field_validator("party_size")
    @classmethod
    def validate_party_size(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 1:
            raise ValueError("party_size must be at least 1")
        return v

    def missing_required_fields(self) -> list[str]:
        required = ("customer_name", "reservation_date", "reservation_time")
        return [name for name in required if not (getattr(self, name) or "").strip()]


class ReservationCreatedResponse(BaseModel):
    success: bool = True
    reservation_id: int
    message: str
    reservation_date: str
    reservation_time: str
    end_time: str
    staff_member_id: Optional[int] = None
    staff_member_name: Optional[str] = None
