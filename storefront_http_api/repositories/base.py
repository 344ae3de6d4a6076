# storefront_http_api/repositories/base.py

from __future__ import annotations

from typing import Any, Generic, List, Optional, Tuple, Type, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from ..db.session import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """
    Shared plumbing for the per-model repositories: one session, primary-key
    lookup, add/delete with flush, and offset pagination.

    Repositories never commit; the service layer owns the transaction.
    """

    model: Type[ModelT]

    def __init__(self, session: Session) -> None:
        self._session = session

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @property
    def session(self) -> Session:
        return self._session

    def _base_select(self) -> Select[Any]:
        return select(self.model)

    # ------------------------------------------------------------------
    # Read operations
    # ------------------------------------------------------------------

    def get_by_id(self, obj_id: int) -> Optional[ModelT]:
        return self.session.get(self.model, obj_id)

    def list_by_ids(self, ids: List[int]) -> List[ModelT]:
        if not ids:
            return []
        stmt = self._base_select().where(self.model.id.in_(ids))  # type: ignore[attr-defined]
        return list(self.session.execute(stmt).scalars().all())

    def count(self, stmt: Optional[Select[Any]] = None) -> int:
        stmt = stmt if stmt is not None else self._base_select()
        count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
        return int(self.session.execute(count_stmt).scalar_one())

    def paginate(
        self,
        stmt: Select[Any],
        *,
        page: int = 1,
        per_page: int = 15,
    ) -> Tuple[List[ModelT], int]:
        """Return one page of ``stmt`` results together with the unpaginated total."""
        page = max(page, 1)
        total = self.count(stmt)
        rows = self.session.execute(
            stmt.offset((page - 1) * per_page).limit(per_page)
        ).scalars().unique().all()
        return list(rows), total

    # ------------------------------------------------------------------
    # Write operations
    # ------------------------------------------------------------------

    def add(self, obj: ModelT) -> ModelT:
        self.session.add(obj)
        self.session.flush()
        return obj

    def update_fields(self, obj: ModelT, fields: dict[str, Any]) -> ModelT:
        for key, value in fields.items():
            if hasattr(obj, key):
                setattr(obj, key, value)
        self.session.add(obj)
        self.session.flush()
        return obj

    def delete(self, obj: ModelT) -> None:
        self.session.delete(obj)
        self.session.flush()


__all__ = ["BaseRepository"]
