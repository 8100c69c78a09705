"""
Revenue rollup over an account's reservations.

Pure computation over a snapshot: the caller loads the completed/confirmed
reservations and the product price table; nothing here touches the database.
"""

from collections.abc import Iterable, Mapping
from dataclasses import asdict, dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Optional

from dateutil.relativedelta import relativedelta

REVENUE_STATUSES = ("completed", "confirmed")
EPOCH = date(1970, 1, 1)


class DateRange(str, Enum):
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    ALL = "all"


@dataclass(frozen=True)
class RevenueReservation:
    reservation_date: date
    party_size: Optional[int] = None
    price_paid: Optional[float] = None
    product_id: Optional[int] = None
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None


@dataclass
class RevenueStats:
    total_revenue: float = 0.0
    today_revenue: float = 0.0
    period_revenue: float = 0.0
    today_customers: int = 0
    total_customers: int = 0
    new_customers_today: int = 0
    reservations_with_revenue: int = 0
    total_reservation_count: int = 0
    period_reservation_count: int = 0
    today_reservation_count: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def period_bounds(date_range: DateRange, today: date) -> tuple[date, date]:
    """Inclusive [start, end] dates of the selected period"""
    if date_range == DateRange.TODAY:
        return today, today
    if date_range == DateRange.WEEK:
        monday = today - timedelta(days=today.weekday())
        return monday, monday + timedelta(days=6)
    if date_range == DateRange.MONTH:
        first = today.replace(day=1)
        return first, first + relativedelta(months=1) - timedelta(days=1)
    return EPOCH, today


def price_per_person(reservation: RevenueReservation, product_prices: Mapping[int, float]) -> float:
    if reservation.price_paid is not None:
        return float(reservation.price_paid)
    if reservation.product_id is not None:
        return float(product_prices.get(reservation.product_id) or 0)
    return 0.0


def compute_revenue_stats(
    reservations: Iterable[RevenueReservation],
    product_prices: Mapping[int, float],
    date_range: DateRange,
    today: date,
) -> RevenueStats:
    """
    Roll up revenue and head counts.

    Revenue of a reservation is price per person times party size (a missing
    party size counts as one). Counts are in persons, not bookings.
    Customers are identified by phone, falling back to email.
    """
    period_start, period_end = period_bounds(date_range, today)
    stats = RevenueStats()
    all_customers: set[str] = set()
    today_customers: set[str] = set()

    for r in reservations:
        party_size = r.party_size or 1
        revenue = price_per_person(r, product_prices) * party_size
        is_today = r.reservation_date == today

        if revenue > 0:
            stats.total_revenue += revenue
            stats.reservations_with_revenue += party_size

            if period_start <= r.reservation_date <= period_end:
                stats.period_revenue += revenue
                stats.period_reservation_count += party_size

            if is_today:
                stats.today_revenue += revenue
                stats.today_reservation_count += party_size

        stats.total_reservation_count += party_size

        customer_key = r.customer_phone or r.customer_email
        if customer_key:
            all_customers.add(customer_key)
            if is_today:
                today_customers.add(customer_key)

    stats.today_customers = len(today_customers)
    stats.total_customers = len(all_customers)
    return stats
