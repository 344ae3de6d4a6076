# storefront_http_api/repositories/pages.py

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select

from ..db import models
from .base import BaseRepository


class PagesRepository(BaseRepository[models.Page]):
    model = models.Page

    def get_by_slug(self, slug: str) -> Optional[models.Page]:
        stmt = self._base_select().where(models.Page.slug == slug)
        return self.session.execute(stmt).scalar_one_or_none()

    def slug_exists(self, slug: str, *, exclude_id: Optional[int] = None) -> bool:
        stmt = select(models.Page.id).where(models.Page.slug == slug)
        if exclude_id is not None:
            stmt = stmt.where(models.Page.id != exclude_id)
        return self.session.execute(stmt).first() is not None

    def ordered(self, *, active_only: bool = False) -> List[models.Page]:
        stmt = self._base_select().order_by(models.Page.title.asc())
        if active_only:
            stmt = stmt.where(models.Page.is_active.is_(True))
        return list(self.session.execute(stmt).scalars().all())


__all__ = ["PagesRepository"]
