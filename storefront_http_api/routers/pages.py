# storefront_http_api/routers/pages.py

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront_http_api.db.session import get_session
from storefront_http_api.schemas.pages import PageRead, PageSummary
from storefront_http_api.services.pages_service import PagesService

router = APIRouter(prefix="/pages", tags=["pages"])


def get_pages_service(session: Session = Depends(get_session)) -> PagesService:
    return PagesService(session)


@router.get("", response_model=List[PageSummary], summary="List content pages")
def list_pages(service: PagesService = Depends(get_pages_service)) -> List[PageSummary]:
    return service.list_public()


@router.get("/{slug}", response_model=PageRead, summary="Content page")
def get_page(
    *,
    slug: str,
    service: PagesService = Depends(get_pages_service),
) -> PageRead:
    return service.get_public(slug)
