# storefront_http_api/routers/admin/pages.py

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from storefront_http_api.db.session import get_session
from storefront_http_api.dependencies import require_admin
from storefront_http_api.schemas.pages import PageAdminRead, PageCreate, PageUpdate
from storefront_http_api.services.pages_service import PagesService

router = APIRouter(
    prefix="/admin/pages",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


def get_admin_pages_service(session: Session = Depends(get_session)) -> PagesService:
    return PagesService(session)


@router.get("", response_model=List[PageAdminRead], summary="List saved content pages")
def list_pages(service: PagesService = Depends(get_admin_pages_service)) -> List[PageAdminRead]:
    return service.index()


@router.post(
    "",
    response_model=PageAdminRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a content page",
    description="Saving a built-in slug (about, privacy, terms, faq, shipping-returns) replaces its default text.",
)
def create_page(
    *,
    payload: PageCreate,
    service: PagesService = Depends(get_admin_pages_service),
) -> PageAdminRead:
    return service.create(payload)


@router.put("/{page_id}", response_model=PageAdminRead, summary="Update a content page")
def update_page(
    *,
    page_id: int,
    payload: PageUpdate,
    service: PagesService = Depends(get_admin_pages_service),
) -> PageAdminRead:
    return service.update(page_id, payload)


@router.delete("/{page_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a content page")
def delete_page(
    *,
    page_id: int,
    service: PagesService = Depends(get_admin_pages_service),
) -> None:
    service.delete(page_id)
