"""Analytics router - FastAPI endpoints for dashboard figures"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user, get_current_user_with_paid_plan
from ...database import get_db
from ...models import User
from .schemas import DashboardStatsResponse, RevenueTrendPoint, ServiceShare
from .service import AnalyticsService

router = APIRouter(prefix="/analytics", tags=["Analytics"])


def get_analytics_service(db: Session = Depends(get_db)) -> AnalyticsService:
    """Dependency injection for AnalyticsService"""
    return AnalyticsService(db)


@router.get("/stats", response_model=DashboardStatsResponse)
async def get_dashboard_stats(
    current_user: User = Depends(get_current_user),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """Headline figures, available on every plan"""
    return service.get_dashboard_stats(current_user)


@router.get("/trends", response_model=list[RevenueTrendPoint])
async def get_revenue_trends(
    days: int = Query(7, ge=1, le=365),
    current_user: User = Depends(get_current_user_with_paid_plan),
    service: AnalyticsService = Depends(get_analytics_service),
):
    return service.get_revenue_trends(current_user, days)


@router.get("/distribution", response_model=list[ServiceShare])
async def get_service_distribution(
    current_user: User = Depends(get_current_user_with_paid_plan),
    service: AnalyticsService = Depends(get_analytics_service),
):
    return service.get_service_distribution(current_user)
