"""Appointment service - CRUD actions requested by n8n workflows"""

import logging
from typing import Any, Optional

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models import Appointment, User
from ...webhook_security import WebhookError
from .repository import AppointmentRepository
from .schemas import AppointmentData, AppointmentWebhookRequest

logger = logging.getLogger(__name__)

REQUIRED_CREATE_FIELDS_MESSAGE = "Missing required fields: user_id, title, start_time, end_time"


def serialize_appointment(appointment: Appointment) -> dict:
    return {
        "id": appointment.id,
        "user_id": appointment.user_id,
        "title": appointment.title,
        "description": appointment.description,
        "start_time": appointment.start_time.isoformat() if appointment.start_time else None,
        "end_time": appointment.end_time.isoformat() if appointment.end_time else None,
        "location": appointment.location,
        "status": appointment.status,
        "metadata": appointment.extra or {},
        "created_at": appointment.created_at.isoformat() if appointment.created_at else None,
        "updated_at": appointment.updated_at.isoformat() if appointment.updated_at else None,
    }


def parse_appointment_data(raw: Any, label: str = "data") -> AppointmentData:
    if raw is None:
        return AppointmentData()
    if not isinstance(raw, dict):
        raise WebhookError(400, f"{label} must be an object")
    try:
        return AppointmentData.model_validate(raw)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        raise WebhookError(400, f"Invalid {label}.{field}: {first['msg']}") from e


class AppointmentWebhookService:
    """Service layer for the n8n appointments webhook"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AppointmentRepository()

    def handle(self, payload: AppointmentWebhookRequest) -> dict:
        handlers = {
            "create": self.create,
            "update": self.update,
            "delete": self.delete,
            "list": self.list_appointments,
            "sync": self.sync,
        }
        handler = handlers.get(payload.action or "")
        if handler is None:
            raise WebhookError(400, f"Unknown action: {payload.action}")

        try:
            return handler(payload)
        except WebhookError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error in n8n appointments ({payload.action}): {e}")
            raise WebhookError(500, str(e)) from e

    def _require_account(self, user_id: int) -> None:
        if not self.db.query(User.id).filter(User.id == user_id).first():
            raise WebhookError(404, f"User not found: {user_id}")

    def _get_or_404(self, appointment_id: Optional[int]) -> Appointment:
        if appointment_id is None:
            raise WebhookError(400, "Missing appointment_id")
        appointment = self.repo.get_by_id(self.db, appointment_id)
        if not appointment:
            raise WebhookError(404, f"Appointment not found: {appointment_id}")
        return appointment

    def _insert(
        self, user_id: Optional[int], data: AppointmentData, appointment_id: Optional[int] = None
    ) -> Appointment:
        if not user_id or not data.title or not data.start_time or not data.end_time:
            raise WebhookError(400, REQUIRED_CREATE_FIELDS_MESSAGE)
        self._require_account(user_id)

        return self.repo.add(
            self.db,
            id=appointment_id,
            user_id=user_id,
            title=data.title,
            description=data.description,
            start_time=data.start_time,
            end_time=data.end_time,
            location=data.location,
            status=data.status or "pending",
            extra=data.metadata or {},
        )

    @staticmethod
    def _apply_update(appointment: Appointment, data: AppointmentData) -> None:
        """Only fields present in the payload change; empty title/times/status are ignored"""
        provided = data.model_fields_set
        if data.title:
            appointment.title = data.title
        if "description" in provided:
            appointment.description = data.description
        if data.start_time:
            appointment.start_time = data.start_time
        if data.end_time:
            appointment.end_time = data.end_time
        if "location" in provided:
            appointment.location = data.location
        if data.status:
            appointment.status = data.status
        if data.metadata:
            appointment.extra = data.metadata

    def create(self, payload: AppointmentWebhookRequest) -> dict:
        if isinstance(payload.data, list):
            raise WebhookError(400, REQUIRED_CREATE_FIELDS_MESSAGE)
        data = parse_appointment_data(payload.data)

        appointment = self._insert(payload.user_id, data)
        self.db.commit()
        self.db.refresh(appointment)

        logger.info(f"Appointment created: {appointment.id}")
        return {"success": True, "appointment": serialize_appointment(appointment)}

    def update(self, payload: AppointmentWebhookRequest) -> dict:
        appointment = self._get_or_404(payload.appointment_id)
        if isinstance(payload.data, list):
            raise WebhookError(400, "data must be an object")
        data = parse_appointment_data(payload.data)

        self._apply_update(appointment, data)
        self.db.commit()
        self.db.refresh(appointment)

        logger.info(f"Appointment updated: {appointment.id}")
        return {"success": True, "appointment": serialize_appointment(appointment)}

    def delete(self, payload: AppointmentWebhookRequest) -> dict:
        appointment = self._get_or_404(payload.appointment_id)
        self.repo.delete(self.db, appointment)
        self.db.commit()

        logger.info(f"Appointment deleted: {payload.appointment_id}")
        return {"success": True, "deleted": payload.appointment_id}

    def list_appointments(self, payload: AppointmentWebhookRequest) -> dict:
        filters = payload.filters
        appointments = self.repo.list_appointments(
            self.db,
            user_id=payload.user_id,
            status=filters.status if filters else None,
            from_date=filters.from_date if filters else None,
            to_date=filters.to_date if filters else None,
        )

        logger.info(f"Listed appointments: {len(appointments)}")
        return {
            "success": True,
            "appointments": [serialize_appointment(a) for a in appointments],
            "count": len(appointments),
        }

    def sync(self, payload: AppointmentWebhookRequest) -> dict:
        """Bulk upsert by id; items without a known id are created"""
        if not isinstance(payload.data, list):
            raise WebhookError(400, "Sync action expects data to be an array of appointments")

        synced = 0
        for index, raw in enumerate(payload.data):
            data = parse_appointment_data(raw, label=f"data[{index}]")
            existing = self.repo.get_by_id(self.db, data.id) if data.id is not None else None

            if existing:
                self._apply_update(existing, data)
            else:
                self._insert(data.user_id or payload.user_id, data, appointment_id=data.id)
            synced += 1

        self.db.commit()
        logger.info(f"Synced appointments: {synced}")
        return {"success": True, "synced": synced}
