"""Appointment repository - Database operations for n8n synced appointments"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Appointment


class AppointmentRepository:
    """Repository for appointment database operations"""

    @staticmethod
    def get_by_id(db: Session, appointment_id: int) -> Optional[Appointment]:
        return db.query(Appointment).filter(Appointment.id == appointment_id).first()

    @staticmethod
    def list_appointments(
        db: Session,
        user_id: Optional[int] = None,
        status: Optional[str] = None,
        from_date: Optional[datetime] = None,
        to_date: Optional[datetime] = None,
    ) -> list[Appointment]:
        query = db.query(Appointment)
        if user_id is not None:
            query = query.filter(Appointment.user_id == user_id)
        if status:
            query = query.filter(Appointment.status == status)
        if from_date:
            query = query.filter(Appointment.start_time >= from_date)
        if to_date:
            query = query.filter(Appointment.start_time <= to_date)
        return query.order_by(Appointment.start_time.asc()).all()

    @staticmethod
    def add(db: Session, **appointment_data) -> Appointment:
        appointment = Appointment(**appointment_data)
        db.add(appointment)
        db.flush()
        return appointment

    @staticmethod
    def delete(db: Session, appointment: Appointment) -> None:
        db.delete(appointment)
