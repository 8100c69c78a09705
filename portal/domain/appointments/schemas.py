"""Appointment webhook schemas"""

from datetime import datetime
from typing import Any, Optional, Union

from pydantic import BaseModel


class AppointmentData(BaseModel):
    id: Optional[int] = None  # only used by sync
    user_id: Optional[int] = None  # only used by sync
    title: Optional[str] = None
    description: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    location: Optional[str] = None
    status: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None


class AppointmentFilters(BaseModel):
    status: Optional[str] = None
    from_date: Optional[datetime] = None
    to_date: Optional[datetime] = None


class AppointmentWebhookRequest(BaseModel):
    action: Optional[str] = None
    user_id: Optional[int] = None
    appointment_id: Optional[int] = None
    # A single appointment, or a list of appointments for "sync"
    data: Optional[Union[list[dict[str, Any]], dict[str, Any]]] = None
    filters: Optional[AppointmentFilters] = None
