import uuid

from fastapi import APIRouter, Depends, status

from app.core.dependencies import require_client, get_review_service
from app.core.responses import ApiResponse
from app.db.schema import User
from app.models.review import ReviewCreate, ReviewRead, PartnerReviewList, ReviewList
from app.services.review import ReviewService


router = APIRouter()


@router.get(
    "/",
    response_model=ApiResponse[PartnerReviewList],
    summary="Public reviews of a partner",
    description="Approved reviews only, with the average rating."
)
def list_partner_reviews(
    partner_id: uuid.UUID,
    service: ReviewService = Depends(get_review_service)
):
    return ApiResponse.ok(service.list_partner_reviews(partner_id), "Reviews fetched successfully")


@router.post(
    "/",
    response_model=ApiResponse[ReviewRead],
    status_code=status.HTTP_201_CREATED,
    summary="Review a partner",
    description="One review per partner. Visible publicly once approved by an admin."
)
def create_review(
    data: ReviewCreate,
    current_user: User = Depends(require_client),
    service: ReviewService = Depends(get_review_service)
):
    return ApiResponse.created(
        service.create_review(current_user.id, data),
        "Review submitted and pending moderation"
    )


@router.get(
    "/my-reviews",
    response_model=ApiResponse[ReviewList],
    summary="List reviews you wrote"
)
def list_my_reviews(
    current_user: User = Depends(require_client),
    service: ReviewService = Depends(get_review_service)
):
    return ApiResponse.ok(service.list_my_reviews(current_user.id), "Reviews fetched successfully")


@router.delete(
    "/{review_id}",
    response_model=ApiResponse[dict],
    summary="Delete a review you wrote"
)
def delete_review(
    review_id: uuid.UUID,
    current_user: User = Depends(require_client),
    service: ReviewService = Depends(get_review_service)
):
    service.delete_own_review(current_user.id, review_id)
    return ApiResponse.ok({}, "Review deleted successfully")
