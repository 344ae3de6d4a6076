# storefront_http_api/routers/admin/dashboard.py

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront_http_api.db.session import get_session
from storefront_http_api.dependencies import require_admin
from storefront_http_api.schemas.dashboard import AdminDashboard
from storefront_http_api.services.dashboard_service import DashboardService

router = APIRouter(
    prefix="/admin/dashboard",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


@router.get(
    "",
    response_model=AdminDashboard,
    summary="Back-office dashboard",
    description="Totals, the five most recent orders and low-stock products.",
)
def admin_dashboard(session: Session = Depends(get_session)) -> AdminDashboard:
    return DashboardService(session).admin()
