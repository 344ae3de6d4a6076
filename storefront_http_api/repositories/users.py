# storefront_http_api/repositories/users.py

from __future__ import annotations

from typing import Optional

from sqlalchemy import func, select

from ..db import models
from .base import BaseRepository


class UsersRepository(BaseRepository[models.User]):
    model = models.User

    def get_by_email(self, email: str) -> Optional[models.User]:
        stmt = self._base_select().where(func.lower(models.User.email) == email.strip().lower())
        return self.session.execute(stmt).scalar_one_or_none()

    def count_customers(self) -> int:
        stmt = select(models.User).where(models.User.role == models.UserRole.CUSTOMER)
        return self.count(stmt)

    def get_verification_by_token(self, token: str) -> Optional[models.EmailVerification]:
        stmt = select(models.EmailVerification).where(models.EmailVerification.token == token)
        return self.session.execute(stmt).scalar_one_or_none()


__all__ = ["UsersRepository"]
