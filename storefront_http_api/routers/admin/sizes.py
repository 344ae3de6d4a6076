# storefront_http_api/routers/admin/sizes.py

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from storefront_http_api.db.session import get_session
from storefront_http_api.dependencies import require_admin
from storefront_http_api.schemas.catalog import (
    SizeCreate,
    SizeListResponse,
    SizeRead,
    SizeStats,
    SizeUpdate,
)
from storefront_http_api.services.admin_catalog_service import AdminSizesService

router = APIRouter(
    prefix="/admin/sizes",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


def get_admin_sizes_service(session: Session = Depends(get_session)) -> AdminSizesService:
    return AdminSizesService(session)


@router.get("", response_model=SizeListResponse, summary="List sizes with stats")
def list_sizes(service: AdminSizesService = Depends(get_admin_sizes_service)) -> SizeListResponse:
    return service.index()


@router.get("/stats", response_model=SizeStats, summary="Size statistics")
def size_stats(service: AdminSizesService = Depends(get_admin_sizes_service)) -> SizeStats:
    return service.stats()


@router.post("", response_model=SizeRead, status_code=status.HTTP_201_CREATED, summary="Create a size")
def create_size(
    *,
    payload: SizeCreate,
    service: AdminSizesService = Depends(get_admin_sizes_service),
) -> SizeRead:
    return service.create(payload)


@router.get("/{size_id}", response_model=SizeRead, summary="Get a size")
def get_size(
    *,
    size_id: int,
    service: AdminSizesService = Depends(get_admin_sizes_service),
) -> SizeRead:
    return service.show(size_id)


@router.put("/{size_id}", response_model=SizeRead, summary="Update a size")
def update_size(
    *,
    size_id: int,
    payload: SizeUpdate,
    service: AdminSizesService = Depends(get_admin_sizes_service),
) -> SizeRead:
    return service.update(size_id, payload)


@router.delete("/{size_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a size")
def delete_size(
    *,
    size_id: int,
    service: AdminSizesService = Depends(get_admin_sizes_service),
) -> None:
    service.delete(size_id)
