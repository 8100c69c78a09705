from datetime import date, timedelta

import pytest

from portal.domain.analytics.revenue import (
    DateRange,
    RevenueReservation,
    compute_revenue_stats,
    period_bounds,
)

TODAY = date(2026, 3, 18)  # a Wednesday
YESTERDAY = TODAY - timedelta(days=1)


def test_price_times_party_size():
    stats = compute_revenue_stats(
        [RevenueReservation(reservation_date=TODAY, party_size=3, price_paid=20.0)],
        {},
        DateRange.MONTH,
        TODAY,
    )
    assert stats.total_revenue == 60
    assert stats.reservations_with_revenue == 3
    assert stats.total_reservation_count == 3


def test_product_price_used_when_nothing_paid():
    reservations = [RevenueReservation(reservation_date=TODAY, party_size=2, product_id=7)]
    stats = compute_revenue_stats(reservations, {7: 12.5}, DateRange.ALL, TODAY)
    assert stats.total_revenue == 25


def test_price_paid_overrides_product_price():
    reservations = [
        RevenueReservation(reservation_date=TODAY, party_size=1, product_id=7, price_paid=5.0)
    ]
    stats = compute_revenue_stats(reservations, {7: 12.5}, DateRange.ALL, TODAY)
    assert stats.total_revenue == 5


def test_zero_revenue_still_counts_persons():
    reservations = [
        RevenueReservation(reservation_date=TODAY, party_size=4, product_id=99),
        RevenueReservation(reservation_date=TODAY, party_size=2),
    ]
    stats = compute_revenue_stats(reservations, {}, DateRange.MONTH, TODAY)
    assert stats.total_revenue == 0
    assert stats.reservations_with_revenue == 0
    assert stats.today_reservation_count == 0
    assert stats.total_reservation_count == 6


def test_missing_party_size_counts_as_one():
    stats = compute_revenue_stats(
        [RevenueReservation(reservation_date=TODAY, party_size=None, price_paid=10.0)],
        {},
        DateRange.MONTH,
        TODAY,
    )
    assert stats.total_revenue == 10
    assert stats.total_reservation_count == 1


def test_today_and_yesterday_buckets():
    reservations = [
        RevenueReservation(reservation_date=TODAY, party_size=2, price_paid=10.0),
        RevenueReservation(reservation_date=YESTERDAY, party_size=1, price_paid=30.0),
    ]
    stats = compute_revenue_stats(reservations, {}, DateRange.TODAY, TODAY)

    assert stats.today_revenue == 20
    assert stats.today_reservation_count == 2
    assert stats.period_revenue == 20
    assert stats.period_reservation_count == 2
    assert stats.total_revenue == 50


def test_period_excludes_other_months():
    reservations = [
        RevenueReservation(reservation_date=date(2026, 3, 1), party_size=1, price_paid=10.0),
        RevenueReservation(reservation_date=date(2026, 2, 28), party_size=1, price_paid=10.0),
        RevenueReservation(reservation_date=date(2026, 3, 31), party_size=1, price_paid=10.0),
    ]
    stats = compute_revenue_stats(reservations, {}, DateRange.MONTH, TODAY)
    assert stats.period_revenue == 20
    assert stats.period_reservation_count == 2


def test_all_period_stops_at_today():
    future = RevenueReservation(reservation_date=TODAY + timedelta(days=3), price_paid=10.0)
    stats = compute_revenue_stats([future], {}, DateRange.ALL, TODAY)
    assert stats.total_revenue == 10
    assert stats.period_revenue == 0


def test_customers_deduplicated_by_phone_or_email():
    reservations = [
        RevenueReservation(reservation_date=TODAY, customer_phone="+49 1"),
        RevenueReservation(reservation_date=YESTERDAY, customer_phone="+49 1"),
        RevenueReservation(reservation_date=TODAY, customer_email="a@example.com"),
        RevenueReservation(reservation_date=YESTERDAY),
    ]
    stats = compute_revenue_stats(reservations, {}, DateRange.MONTH, TODAY)
    assert stats.total_customers == 2
    assert stats.today_customers == 2


@pytest.mark.parametrize(
    "date_range,expected",
    [
        (DateRange.TODAY, (TODAY, TODAY)),
        (DateRange.WEEK, (date(2026, 3, 16), date(2026, 3, 22))),
        (DateRange.MONTH, (date(2026, 3, 1), date(2026, 3, 31))),
        (DateRange.ALL, (date(1970, 1, 1), TODAY)),
    ],
)
def test_period_bounds(date_range, expected):
    assert period_bounds(date_range, TODAY) == expected


def test_month_bounds_in_leap_february():
    assert period_bounds(DateRange.MONTH, date(2024, 2, 10)) == (
        date(2024, 2, 1),
        date(2024, 2, 29),
    )
