# storefront_http_api/routers/dashboard.py

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront_http_api.db import models
from storefront_http_api.db.session import get_session
from storefront_http_api.dependencies import get_current_user
from storefront_http_api.schemas.dashboard import CustomerDashboard
from storefront_http_api.services.dashboard_service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get(
    "",
    response_model=CustomerDashboard,
    summary="Customer dashboard",
    description="Five most recent orders, order statistics and the wishlist.",
)
def customer_dashboard(
    *,
    user: models.User = Depends(get_current_user),
    session: Session = Depends(get_session),
) -> CustomerDashboard:
    return DashboardService(session).customer(user.id)
