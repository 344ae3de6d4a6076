# storefront_http_api/schemas/common.py

from __future__ import annotations

import math
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Base / shared types
# ---------------------------------------------------------------------------


class APIModel(BaseModel):
    """
    Base Pydantic model for all HTTP API schemas.

    - ``from_attributes`` so ORM rows (and their computed properties) can be
      validated directly with ``Model.model_validate(row)``
    - ``populate_by_name`` to make future renames easier
    """

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class PageMeta(APIModel):
    page: int = Field(..., ge=1)
    per_page: int = Field(..., ge=1)
    total: int = Field(..., ge=0)
    last_page: int = Field(..., ge=1)

    @classmethod
    def build(cls, *, page: int, per_page: int, total: int) -> "PageMeta":
        return cls(
            page=max(page, 1),
            per_page=per_page,
            total=total,
            last_page=max(1, math.ceil(total / per_page)) if per_page else 1,
        )


class MessageResponse(APIModel):
    message: str
    detail: Optional[str] = None


__all__ = ["APIModel", "PageMeta", "MessageResponse"]
