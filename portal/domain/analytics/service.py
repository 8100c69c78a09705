"""Analytics service - Revenue dashboard figures"""

import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ...models import User
from .repository import AnalyticsRepository
from .revenue import DateRange, RevenueStats, compute_revenue_stats

logger = logging.getLogger(__name__)


class AnalyticsService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = AnalyticsRepository()

    def get_revenue_stats(
        self, user: User, date_range: DateRange, today: Optional[date] = None
    ) -> RevenueStats:
        today = today or date.today()
        reservations = self.repo.get_revenue_reservations(self.db, user.id)
        prices = self.repo.get_product_prices(self.db, user.id)

        stats = compute_revenue_stats(reservations, prices, date_range, today)

        # Imported contacts are the better customer count once the account has any
        contact_count = self.repo.count_contacts(self.db, user.id)
        if contact_count:
            stats.total_customers = contact_count
        stats.new_customers_today = self.repo.count_contacts_created_on(self.db, user.id, today)

        logger.debug(
            f"Revenue stats for user {user.id} ({date_range.value}): "
            f"{len(reservations)} reservations, total {stats.total_revenue:.2f}"
        )
        return stats
