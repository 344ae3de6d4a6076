# storefront_http_api/routers/reviews.py

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from storefront_http_api.db import models
from storefront_http_api.db.session import get_session
from storefront_http_api.dependencies import get_current_user
from storefront_http_api.schemas.reviews import ReviewCreate, ReviewRead, ReviewUpdate
from storefront_http_api.services.reviews_service import ReviewsService

router = APIRouter(prefix="/reviews", tags=["reviews"])


def get_reviews_service(session: Session = Depends(get_session)) -> ReviewsService:
    return ReviewsService(session)


@router.post(
    "",
    response_model=ReviewRead,
    status_code=status.HTTP_201_CREATED,
    summary="Review a purchased product",
    description="Requires a delivered order containing the product; one review per product.",
)
def create_review(
    *,
    payload: ReviewCreate,
    user: models.User = Depends(get_current_user),
    service: ReviewsService = Depends(get_reviews_service),
) -> ReviewRead:
    return service.create(user.id, payload)


@router.put("/{review_id}", response_model=ReviewRead, summary="Edit my review")
def update_review(
    *,
    review_id: int,
    payload: ReviewUpdate,
    user: models.User = Depends(get_current_user),
    service: ReviewsService = Depends(get_reviews_service),
) -> ReviewRead:
    return service.update(user.id, review_id, payload)


@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete my review")
def delete_review(
    *,
    review_id: int,
    user: models.User = Depends(get_current_user),
    service: ReviewsService = Depends(get_reviews_service),
) -> None:
    service.delete(user.id, review_id)
