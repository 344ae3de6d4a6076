# storefront_http_api/repositories/settings.py

from __future__ import annotations

from typing import List, Optional

from ..db import models
from .base import BaseRepository


class SettingsRepository(BaseRepository[models.Setting]):
    model = models.Setting

    def get_by_key(self, key: str) -> Optional[models.Setting]:
        stmt = self._base_select().where(models.Setting.key == key)
        return self.session.execute(stmt).scalar_one_or_none()

    def all(self) -> List[models.Setting]:
        stmt = self._base_select().order_by(models.Setting.key.asc())
        return list(self.session.execute(stmt).scalars().all())

    def upsert(self, key: str, value: Optional[str], type_: models.SettingType) -> models.Setting:
        row = self.get_by_key(key)
        if row is None:
            return self.add(models.Setting(key=key, value=value, type=type_))
        row.value = value
        row.type = type_
        self.session.flush()
        return row

    def delete_key(self, key: str) -> bool:
        row = self.get_by_key(key)
        if row is None:
            return False
        self.delete(row)
        return True


__all__ = ["SettingsRepository"]
