# storefront_http_api/services/pages_service.py

"""
Content pages (about, privacy, terms, FAQ, shipping & returns).

Each built-in slug has a default text rendered from the store settings, so
a fresh shop serves every page. Saving a page with the same slug from the
back-office replaces the default; deactivating it hides the page entirely.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from storefront_http_api.db import models
from storefront_http_api.exceptions import ConflictError, NotFoundError
from storefront_http_api.logging import get_logger
from storefront_http_api.repositories.pages import PagesRepository
from storefront_http_api.schemas.pages import (
    PageAdminRead,
    PageCreate,
    PageRead,
    PageSummary,
    PageUpdate,
)
from storefront_http_api.services.admin_catalog_service import slugify
from storefront_http_api.services.settings_service import SettingsService

logger = get_logger(__name__)


def _about(get: Callable[[str], object]) -> str:
    return (
        f"{get('site_name')} is an independent online shop. We pick every product "
        "we sell, ship from our own warehouse and answer every message ourselves.\n\n"
        f"Questions? Write to {get('contact_email')}."
    )


def _privacy(get: Callable[[str], object]) -> str:
    return (
        f"{get('site_name')} collects the personal data needed to process your orders: "
        "name, email, shipping and billing addresses. Card payments are handled by our "
        "payment provider and card details never reach our servers.\n\n"
        "We do not sell your data. You can ask for a copy of your data or for its "
        f"deletion at any time by writing to {get('contact_email')}."
    )


def _terms(get: Callable[[str], object]) -> str:
    return (
        f"By placing an order with {get('site_name')} you agree to these terms. "
        "Prices are shown in "
        f"{get('default_currency')} and include tax where stated. An order is "
        "confirmed once payment succeeds; we may cancel orders we cannot fulfil "
        "and refund them in full."
    )


def _faq(get: Callable[[str], object]) -> str:
    return "\n\n".join(
        [
            "How do I track my order?\nYou receive a tracking number by email as soon as "
            "your order ships.",
            "Can I cancel my order?\nOrders can be cancelled from your account until they ship.",
            f"How do I contact you?\nUse the contact form or write to {get('contact_email')}.",
        ]
    )


def _shipping_returns(get: Callable[[str], object]) -> str:
    return (
        f"Orders are processed within {get('processing_time_days')} business days. "
        f"Shipping is free on orders over {get('free_shipping_threshold')} "
        f"{get('default_currency')}.\n\n"
        "You can return unused items within 30 days of delivery. Contact us at "
        f"{get('contact_email')} to start a return."
    )


DEFAULT_PAGES: Dict[str, Tuple[str, Callable[[Callable[[str], object]], str]]] = {
    "about": ("About Us", _about),
    "privacy": ("Privacy Policy", _privacy),
    "terms": ("Terms of Service", _terms),
    "faq": ("Frequently Asked Questions", _faq),
    "shipping-returns": ("Shipping & Returns", _shipping_returns),
}


class PagesService:
    def __init__(self, session: Session) -> None:
        self._session = session
        self._repo = PagesRepository(session)
        self._settings = SettingsService(session)

    def _default(self, slug: str) -> PageRead:
        title, render = DEFAULT_PAGES[slug]
        return PageRead(slug=slug, title=title, content=render(self._settings.get), is_default=True)

    @staticmethod
    def _present(page: models.Page) -> PageRead:
        return PageRead(
            slug=page.slug,
            title=page.title,
            content=page.content,
            is_active=page.is_active,
            updated_at=page.updated_at,
        )

    def _require(self, page_id: int) -> models.Page:
        page = self._repo.get_by_id(page_id)
        if page is None:
            raise NotFoundError(f"Page with id={page_id} not found.")
        return page

    def _check_slug(self, slug: str, *, exclude_id: Optional[int] = None) -> None:
        if self._repo.slug_exists(slug, exclude_id=exclude_id):
            raise ConflictError(f"A page with slug '{slug}' already exists.")

    # ------------------------------------------------------------------
    # Storefront
    # ------------------------------------------------------------------

    def list_public(self) -> List[PageSummary]:
        saved = {p.slug: p for p in self._repo.ordered()}
        pages = [PageSummary(slug=p.slug, title=p.title) for p in saved.values() if p.is_active]
        pages.extend(
            PageSummary(slug=slug, title=title)
            for slug, (title, _) in DEFAULT_PAGES.items()
            if slug not in saved
        )
        return sorted(pages, key=lambda p: p.title)

    def get_public(self, slug: str) -> PageRead:
        page = self._repo.get_by_slug(slug)
        if page is not None:
            if not page.is_active:
                raise NotFoundError("Page not found.")
            return self._present(page)
        if slug in DEFAULT_PAGES:
            return self._default(slug)
        raise NotFoundError("Page not found.")

    # ------------------------------------------------------------------
    # Back-office
    # ------------------------------------------------------------------

    def index(self) -> List[PageAdminRead]:
        return [PageAdminRead.model_validate(p) for p in self._repo.ordered()]

    def create(self, payload: PageCreate) -> PageAdminRead:
        fields = payload.model_dump()
        fields["slug"] = slugify(payload.slug or payload.title)
        self._check_slug(fields["slug"])
        page = self._repo.add(models.Page(**fields))
        self._session.commit()
        logger.info("page_created", page_id=page.id, slug=page.slug)
        return PageAdminRead.model_validate(page)

    def update(self, page_id: int, payload: PageUpdate) -> PageAdminRead:
        page = self._require(page_id)
        fields = payload.model_dump(exclude_unset=True)
        if fields.get("slug"):
            fields["slug"] = slugify(fields["slug"])
            self._check_slug(fields["slug"], exclude_id=page.id)
        self._repo.update_fields(page, fields)
        self._session.commit()
        logger.info("page_updated", page_id=page.id, fields=sorted(fields))
        return PageAdminRead.model_validate(page)

    def delete(self, page_id: int) -> None:
        page = self._require(page_id)
        self._repo.delete(page)
        self._session.commit()
        logger.info("page_deleted", page_id=page_id)


__all__ = ["PagesService", "DEFAULT_PAGES"]
