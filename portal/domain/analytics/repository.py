"""Analytics repository - Read-only queries feeding the revenue rollup"""

from datetime import date, datetime, timedelta

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Contact, Product, Reservation
from .revenue import REVENUE_STATUSES, RevenueReservation


class AnalyticsRepository:
    """Repository for analytics database queries"""

    @staticmethod
    def get_revenue_reservations(db: Session, user_id: int) -> list[RevenueReservation]:
        rows = (
            db.query(
                Reservation.reservation_date,
                Reservation.party_size,
                Reservation.price_paid,
                Reservation.product_id,
                Reservation.customer_phone,
                Reservation.customer_email,
            )
            .filter(Reservation.user_id == user_id, Reservation.status.in_(REVENUE_STATUSES))
            .all()
        )
        return [
            RevenueReservation(
                reservation_date=row.reservation_date,
                party_size=row.party_size,
                price_paid=row.price_paid,
                product_id=row.product_id,
                customer_phone=row.customer_phone,
                customer_email=row.customer_email,
            )
            for row in rows
        ]

    @staticmethod
    def get_product_prices(db: Session, user_id: int) -> dict[int, float]:
        rows = db.query(Product.id, Product.price).filter(Product.user_id == user_id).all()
        return {row.id: float(row.price or 0) for row in rows}

    @staticmethod
    def count_contacts(db: Session, user_id: int) -> int:
        return db.query(func.count(Contact.id)).filter(Contact.user_id == user_id).scalar() or 0

    @staticmethod
    def count_contacts_created_on(db: Session, user_id: int, day: date) -> int:
        start = datetime.combine(day, datetime.min.time())
        return (
            db.query(func.count(Contact.id))
            .filter(
                Contact.user_id == user_id,
                Contact.created_at >= start,
                Contact.created_at < start + timedelta(days=1),
            )
            .scalar()
            or 0
        )
