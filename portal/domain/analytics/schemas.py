"""Analytics schemas"""

from pydantic import BaseModel


class RevenueStatsResponse(BaseModel):
    range: str
    total_revenue: float
    today_revenue: float
    period_revenue: float
    today_customers: int
    total_customers: int
    new_customers_today: int
    reservations_with_revenue: int
    total_reservation_count: int
    period_reservation_count: int
    today_reservation_count: int
