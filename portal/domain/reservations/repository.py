"""Reservation repository - Database operations for reservations"""

from datetime import date, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Notification, Reservation, StaffMember, User


class ReservationRepository:
    """Repository for reservation database operations"""

    @staticmethod
    def lock_account(db: Session, user_id: int) -> User:
        """
        Take a row lock on the account for the rest of the transaction.
        Serializes concurrent bookings of one account (no-op on SQLite).
        """
        return db.query(User).filter(User.id == user_id).with_for_update().one()

    @staticmethod
    def get_active_staff_members(db: Session, user_id: int) -> list[StaffMember]:
        return (
            db.query(StaffMember)
            .filter(StaffMember.user_id == user_id, StaffMember.is_active.is_(True))
            .order_by(StaffMember.id)
            .all()
        )

    @staticmethod
    def get_active_reservations_near_day(
        db: Session, user_id: int, day: date, staff_member_id: Optional[int] = None
    ) -> list[Reservation]:
        """
        Non-cancelled reservations on a day and the day before (late bookings
        can run past midnight), optionally for one staff member
        """
        query = db.query(Reservation).filter(
            Reservation.user_id == user_id,
            Reservation.reservation_date.in_([day - timedelta(days=1), day]),
            Reservation.status != "cancelled",
        )
        if staff_member_id is not None:
            query = query.filter(Reservation.staff_member_id == staff_member_id)
        return query.all()

    @staticmethod
    def add_reservation(db: Session, user_id: int, **reservation_data) -> Reservation:
        """Stage a reservation in the current transaction"""
        reservation = Reservation(user_id=user_id, **reservation_data)
        db.add(reservation)
        db.flush()
        return reservation

    @staticmethod
    def add_notification(
        db: Session, user_id: int, title: str, message: str, link: Optional[str] = None
    ) -> Notification:
        notification = Notification(
            user_id=user_id, title=title, message=message, type="info", link=link
        )
        db.add(notification)
        return notification
