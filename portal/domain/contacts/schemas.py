"""Contact domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class ContactResponse(BaseModel):
    id: int
    name: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    info: Optional[str] = None
    consent_status: Optional[str] = None
    gender: Optional[str] = None
    booking_count: int = 0
    original_created_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class ContactListResponse(BaseModel):
    total: int
    contacts: list[ContactResponse]


class ContactImportResult(BaseModel):
    success: int
    failed: int
    errors: list[str]
