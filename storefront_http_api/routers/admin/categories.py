# storefront_http_api/routers/admin/categories.py

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from storefront_http_api.db.session import get_session
from storefront_http_api.dependencies import require_admin
from storefront_http_api.schemas.catalog import (
    CategoryCreate,
    CategoryListResponse,
    CategoryReorderItem,
    CategoryStats,
    CategoryUpdate,
    CategoryWithCount,
)
from storefront_http_api.services.admin_catalog_service import AdminCategoriesService

router = APIRouter(
    prefix="/admin/categories",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


def get_admin_categories_service(session: Session = Depends(get_session)) -> AdminCategoriesService:
    return AdminCategoriesService(session)


@router.get("", response_model=CategoryListResponse, summary="List categories with stats")
def list_categories(
    service: AdminCategoriesService = Depends(get_admin_categories_service),
) -> CategoryListResponse:
    return service.index()


@router.get("/stats", response_model=CategoryStats, summary="Category statistics")
def category_stats(
    service: AdminCategoriesService = Depends(get_admin_categories_service),
) -> CategoryStats:
    return service.stats()


@router.post(
    "",
    response_model=CategoryWithCount,
    status_code=status.HTTP_201_CREATED,
    summary="Create a category",
)
def create_category(
    *,
    payload: CategoryCreate,
    service: AdminCategoriesService = Depends(get_admin_categories_service),
) -> CategoryWithCount:
    return service.create(payload)


@router.post("/reorder", response_model=CategoryListResponse, summary="Reorder categories")
def reorder_categories(
    *,
    payload: List[CategoryReorderItem],
    service: AdminCategoriesService = Depends(get_admin_categories_service),
) -> CategoryListResponse:
    return service.reorder(payload)


@router.get("/{category_id}", response_model=CategoryWithCount, summary="Get a category")
def get_category(
    *,
    category_id: int,
    service: AdminCategoriesService = Depends(get_admin_categories_service),
) -> CategoryWithCount:
    return service.show(category_id)


@router.put("/{category_id}", response_model=CategoryWithCount, summary="Update a category")
def update_category(
    *,
    category_id: int,
    payload: CategoryUpdate,
    service: AdminCategoriesService = Depends(get_admin_categories_service),
) -> CategoryWithCount:
    return service.update(category_id, payload)


@router.delete(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a category",
    description="Refused with 409 while products still reference the category.",
)
def delete_category(
    *,
    category_id: int,
    service: AdminCategoriesService = Depends(get_admin_categories_service),
) -> None:
    service.delete(category_id)
