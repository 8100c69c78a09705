"""Appointment router - n8n webhook for appointment CRUD"""

from fastapi import APIRouter, Depends
from pydantic import ValidationError
from sqlalchemy.orm import Session

from ...database import get_db
from ...rate_limiter import create_rate_limiter
from ...webhook_security import WebhookError, parse_webhook_json, verify_n8n_webhook
from .schemas import AppointmentWebhookRequest
from .service import AppointmentWebhookService

router = APIRouter(prefix="/n8n", tags=["n8n Webhooks"])

appointments_rate_limit = create_rate_limiter(limit=120, window_seconds=60, key_prefix="n8n_appt")


def get_appointment_service(db: Session = Depends(get_db)) -> AppointmentWebhookService:
    """Dependency injection for AppointmentWebhookService"""
    return AppointmentWebhookService(db)


@router.post("/appointments", dependencies=[Depends(appointments_rate_limit)])
async def appointments_webhook(
    raw_body: bytes = Depends(verify_n8n_webhook),
    service: AppointmentWebhookService = Depends(get_appointment_service),
):
    """Create, update, delete, list or bulk sync appointments (x-n8n-signature)"""
    try:
        payload = AppointmentWebhookRequest.model_validate(parse_webhook_json(raw_body))
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        raise WebhookError(400, f"Invalid {field}: {first['msg']}") from e

    return service.handle(payload)
