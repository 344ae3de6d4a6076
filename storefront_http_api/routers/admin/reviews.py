# storefront_http_api/routers/admin/reviews.py

from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from storefront_http_api.db.session import get_session
from storefront_http_api.dependencies import require_admin
from storefront_http_api.schemas.orders import BulkUpdateResult
from storefront_http_api.schemas.reviews import (
    AdminReviewListResponse,
    BulkReviewUpdate,
    ReviewApprovalUpdate,
    ReviewRead,
)
from storefront_http_api.services.reviews_service import ReviewsService

router = APIRouter(
    prefix="/admin/reviews",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


def get_admin_reviews_service(session: Session = Depends(get_session)) -> ReviewsService:
    return ReviewsService(session)


@router.get("", response_model=AdminReviewListResponse, summary="List reviews")
def list_reviews(
    *,
    status_filter: Optional[str] = Query(None, alias="status", pattern="^(approved|pending)$"),
    rating: Optional[int] = Query(None, ge=1, le=5),
    search: Optional[str] = Query(None),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    page: int = Query(1, ge=1),
    service: ReviewsService = Depends(get_admin_reviews_service),
) -> AdminReviewListResponse:
    return service.admin_index(
        status=status_filter,
        rating=rating,
        search=search,
        date_from=date_from,
        date_to=date_to,
        page=page,
    )


@router.post("/bulk", response_model=BulkUpdateResult, summary="Approve or reject many reviews")
def bulk_update(
    *,
    payload: BulkReviewUpdate,
    service: ReviewsService = Depends(get_admin_reviews_service),
) -> BulkUpdateResult:
    return service.bulk_update(payload.review_ids, payload.action)


@router.get("/{review_id}", response_model=ReviewRead, summary="Get a review")
def get_review(
    *,
    review_id: int,
    service: ReviewsService = Depends(get_admin_reviews_service),
) -> ReviewRead:
    return service.admin_get(review_id)


@router.put("/{review_id}", response_model=ReviewRead, summary="Set review approval")
def update_review(
    *,
    review_id: int,
    payload: ReviewApprovalUpdate,
    service: ReviewsService = Depends(get_admin_reviews_service),
) -> ReviewRead:
    return service.set_approval(review_id, payload.is_approved)


@router.post("/{review_id}/approve", response_model=ReviewRead, summary="Approve a review")
def approve_review(
    *,
    review_id: int,
    service: ReviewsService = Depends(get_admin_reviews_service),
) -> ReviewRead:
    return service.approve(review_id)


@router.post("/{review_id}/reject", response_model=ReviewRead, summary="Reject a review")
def reject_review(
    *,
    review_id: int,
    service: ReviewsService = Depends(get_admin_reviews_service),
) -> ReviewRead:
    return service.reject(review_id)


@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a review")
def delete_review(
    *,
    review_id: int,
    service: ReviewsService = Depends(get_admin_reviews_service),
) -> None:
    service.admin_delete(review_id)
