"""Analytics router - Revenue dashboard endpoint"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .revenue import DateRange
from .schemas import RevenueStatsResponse
from .service import AnalyticsService

router = APIRouter(prefix="/analytics", tags=["Analytics"])


def get_analytics_service(db: Session = Depends(get_db)) -> AnalyticsService:
    """Dependency injection for AnalyticsService"""
    return AnalyticsService(db)


@router.get("/revenue", response_model=RevenueStatsResponse)
async def get_revenue(
    date_range: DateRange = Query(DateRange.MONTH, alias="range"),
    current_user: User = Depends(get_current_user),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """Revenue and customer figures for the dashboard"""
    stats = service.get_revenue_stats(current_user, date_range)
    return RevenueStatsResponse(range=date_range.value, **stats.to_dict())
