"""Reservation router - n8n webhook for booking reservations"""

import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session

from ...auth import get_api_key_account
from ...database import get_db
from ...models import User
from ...rate_limiter import create_rate_limiter
from ...webhook_security import WebhookError
from .schemas import ReservationWebhookRequest
from .service import ReservationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/n8n", tags=["n8n Webhooks"])

reservation_rate_limit = create_rate_limiter(limit=120, window_seconds=60, key_prefix="n8n_res")


def get_reservation_service(db: Session = Depends(get_db)) -> ReservationService:
    """Dependency injection for ReservationService"""
    return ReservationService(db)


@router.post("/reservations", status_code=201, dependencies=[Depends(reservation_rate_limit)])
async def create_reservation(
    request: Request,
    account: User = Depends(get_api_key_account),
    service: ReservationService = Depends(get_reservation_service),
):
    """
    Create a reservation on behalf of an account (x-api-key).

    Returns 409 TIME_SLOT_OCCUPIED with up to five alternative slots when the
    requested time overlaps an existing booking.
    """
    try:
        body = await request.json()
        payload = ReservationWebhookRequest.model_validate(body)
    except json.JSONDecodeError as e:
        raise WebhookError(400, "Invalid JSON body", "VALIDATION_ERROR") from e
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        raise WebhookError(400, f"{field}: {first['msg']}", "VALIDATION_ERROR") from e

    result = service.create_from_webhook(account, payload)
    return JSONResponse(status_code=201, content=result.model_dump())
