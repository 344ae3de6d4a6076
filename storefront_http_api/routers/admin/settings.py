# storefront_http_api/routers/admin/settings.py

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from storefront_http_api.db.session import get_session
from storefront_http_api.dependencies import require_admin
from storefront_http_api.schemas.settings import SettingsResponse
from storefront_http_api.services.settings_service import SettingsService

router = APIRouter(
    prefix="/admin/settings",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


def get_settings_service(session: Session = Depends(get_session)) -> SettingsService:
    return SettingsService(session)


@router.get("", response_model=SettingsResponse, summary="All store settings")
def get_settings(service: SettingsService = Depends(get_settings_service)) -> SettingsResponse:
    return SettingsResponse(settings=service.all())


@router.put(
    "/{group}",
    response_model=SettingsResponse,
    summary="Update one settings group",
    description="group is one of general, payment, shipping, tax, email.",
)
def update_settings_group(
    *,
    group: str,
    payload: Dict[str, Any] = Body(...),
    service: SettingsService = Depends(get_settings_service),
) -> SettingsResponse:
    return SettingsResponse(settings=service.update_group(group, payload))
