import uuid
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request, status

from app.core.audit import _perform_audit_log
from app.core.dependencies import (
    require_admin, get_admin_service, get_partner_service, get_review_service
)
from app.core.responses import ApiResponse
from app.db.schema import User, AuditAction
from app.models.admin import (
    DashboardStats,
    CategoryCreate, CategoryUpdate, CategoryRead, CategoryList,
    LocationCreate, LocationUpdate, LocationRead, LocationList,
)
from app.models.partner import PartnerRead, PendingVerificationPage, VerificationDecision
from app.models.review import ReviewRead, ReviewList, ReviewModeration
from app.services.admin import AdminService
from app.services.partner import PartnerService
from app.services.review import ReviewService


router = APIRouter()


def _client_ip(request: Request) -> Optional[str]:
    return request.client.host if request.client else None


@router.get(
    "/stats",
    response_model=ApiResponse[DashboardStats],
    summary="Marketplace KPIs"
)
def get_dashboard_stats(
    current_user: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service)
):
    return ApiResponse.ok(service.get_dashboard_stats(), "Dashboard stats fetched successfully")


# ==========================================
# PARTNER VERIFICATION
# ==========================================

@router.get(
    "/verifications",
    response_model=ApiResponse[PendingVerificationPage],
    summary="Partners waiting for verification",
    description="Newest first, paginated."
)
def list_pending_verifications(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    current_user: User = Depends(require_admin),
    service: PartnerService = Depends(get_partner_service)
):
    return ApiResponse.ok(service.list_pending(page, limit), "Pending verifications fetched successfully")


@router.put(
    "/verify/{partner_id}",
    response_model=ApiResponse[PartnerRead],
    summary="Verify or reject a partner",
    description="Only pending partners can be decided. Both outcomes are final."
)
def verify_partner(
    partner_id: uuid.UUID,
    decision: VerificationDecision,
    request: Request,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(require_admin),
    service: PartnerService = Depends(get_partner_service)
):
    partner = service.verify_partner(
        partner_id, current_user.id, decision.status, decision.comment)

    background_tasks.add_task(
        _perform_audit_log,
        user_id=current_user.id,
        entity_type="Partner",
        entity_id=partner.id,
        action=AuditAction.UPDATE,
        changes={"status": partner.status.value, "comment": partner.verification_comment},
        ip_address=_client_ip(request)
    )
    return ApiResponse.ok(partner, f"Partner {partner.status.value} successfully")


# ==========================================
# REVIEW MODERATION
# ==========================================

@router.get(
    "/reviews",
    response_model=ApiResponse[ReviewList],
    summary="List reviews for moderation"
)
def list_reviews(
    status_filter: Optional[str] = Query(default=None, alias="status"),
    current_user: User = Depends(require_admin),
    service: ReviewService = Depends(get_review_service)
):
    return ApiResponse.ok(service.list_reviews(status_filter), "Reviews fetched successfully")


@router.put(
    "/reviews/{review_id}",
    response_model=ApiResponse[ReviewRead],
    summary="Approve or reject a review"
)
def moderate_review(
    review_id: uuid.UUID,
    decision: ReviewModeration,
    request: Request,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(require_admin),
    service: ReviewService = Depends(get_review_service)
):
    review = service.moderate_review(
        review_id, current_user.id, decision.status, decision.comment)

    background_tasks.add_task(
        _perform_audit_log,
        user_id=current_user.id,
        entity_type="Review",
        entity_id=review.id,
        action=AuditAction.UPDATE,
        changes={"moderation_status": review.moderation_status.value},
        ip_address=_client_ip(request)
    )
    return ApiResponse.ok(review, f"Review {review.moderation_status.value} successfully")


@router.delete(
    "/reviews/{review_id}",
    response_model=ApiResponse[dict],
    summary="Delete a review"
)
def delete_review(
    review_id: uuid.UUID,
    request: Request,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(require_admin),
    service: ReviewService = Depends(get_review_service)
):
    service.delete_review(review_id)
    background_tasks.add_task(
        _perform_audit_log,
        user_id=current_user.id,
        entity_type="Review",
        entity_id=review_id,
        action=AuditAction.DELETE,
        changes={},
        ip_address=_client_ip(request)
    )
    return ApiResponse.ok({}, "Review deleted successfully")


# ==========================================
# CATEGORIES
# ==========================================

@router.get("/categories", response_model=ApiResponse[CategoryList], summary="List categories")
def list_categories(
    current_user: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service)
):
    return ApiResponse.ok(service.list_categories(), "Categories fetched successfully")


@router.post(
    "/categories",
    response_model=ApiResponse[CategoryRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create a category"
)
def create_category(
    data: CategoryCreate,
    current_user: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service)
):
    return ApiResponse.created(service.create_category(data), "Category created successfully")


@router.put("/categories/{category_id}", response_model=ApiResponse[CategoryRead], summary="Update a category")
def update_category(
    category_id: uuid.UUID,
    data: CategoryUpdate,
    current_user: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service)
):
    return ApiResponse.ok(service.update_category(category_id, data), "Category updated successfully")


@router.delete("/categories/{category_id}", response_model=ApiResponse[dict], summary="Delete a category")
def delete_category(
    category_id: uuid.UUID,
    current_user: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service)
):
    service.delete_category(category_id)
    return ApiResponse.ok({}, "Category deleted successfully")


# ==========================================
# LOCATIONS
# ==========================================

@router.get("/locations", response_model=ApiResponse[LocationList], summary="List locations")
def list_locations(
    current_user: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service)
):
    return ApiResponse.ok(service.list_locations(), "Locations fetched successfully")


@router.post(
    "/locations",
    response_model=ApiResponse[LocationRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create a location"
)
def create_location(
    data: LocationCreate,
    current_user: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service)
):
    return ApiResponse.created(service.create_location(data), "Location created successfully")


@router.put("/locations/{location_id}", response_model=ApiResponse[LocationRead], summary="Update a location")
def update_location(
    location_id: uuid.UUID,
    data: LocationUpdate,
    current_user: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service)
):
    return ApiResponse.ok(service.update_location(location_id, data), "Location updated successfully")


@router.delete("/locations/{location_id}", response_model=ApiResponse[dict], summary="Delete a location")
def delete_location(
    location_id: uuid.UUID,
    current_user: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service)
):
    service.delete_location(location_id)
    return ApiResponse.ok({}, "Location deleted successfully")
