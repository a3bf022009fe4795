import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from app.core.dependencies import require_client_or_admin, get_inquiry_service
from app.core.responses import ApiResponse
from app.db.schema import User
from app.models.inquiry import (
    InquiryCreate, InquiryCreated, InquiryRead, InquiryList,
    InquiryStats, InquiryStatusUpdate
)
from app.services.inquiry import InquiryService


router = APIRouter()


@router.post(
    "/",
    response_model=ApiResponse[InquiryCreated],
    status_code=status.HTTP_201_CREATED,
    summary="Post a shoot inquiry",
    description=(
        "Stores the inquiry and routes it to up to 10 verified partners "
        "in the same city whose services match the requested category."
    )
)
def create_inquiry(
    data: InquiryCreate,
    current_user: User = Depends(require_client_or_admin),
    service: InquiryService = Depends(get_inquiry_service)
):
    inquiry, matched = service.create_inquiry(current_user.id, data)
    return ApiResponse.created(
        InquiryCreated(inquiry=inquiry, matched_partners_count=matched),
        f"Inquiry created successfully. Matched with {matched} partner(s)."
    )


@router.get(
    "/",
    response_model=ApiResponse[InquiryList],
    summary="List own inquiries",
    description="Newest first. Optional 'status' filter."
)
def list_inquiries(
    status_filter: Optional[str] = Query(default=None, alias="status"),
    current_user: User = Depends(require_client_or_admin),
    service: InquiryService = Depends(get_inquiry_service)
):
    return ApiResponse.ok(
        service.list_client_inquiries(current_user.id, status_filter),
        "Inquiries fetched successfully"
    )


@router.get(
    "/stats",
    response_model=ApiResponse[InquiryStats],
    summary="Inquiry counts by status"
)
def get_inquiry_stats(
    current_user: User = Depends(require_client_or_admin),
    service: InquiryService = Depends(get_inquiry_service)
):
    return ApiResponse.ok(service.get_inquiry_stats(current_user.id), "Inquiry stats fetched successfully")


@router.get(
    "/{inquiry_id}",
    response_model=ApiResponse[InquiryRead],
    summary="Get one of your inquiries"
)
def get_inquiry(
    inquiry_id: uuid.UUID,
    current_user: User = Depends(require_client_or_admin),
    service: InquiryService = Depends(get_inquiry_service)
):
    return ApiResponse.ok(service.get_inquiry(current_user.id, inquiry_id), "Inquiry fetched successfully")


@router.put(
    "/{inquiry_id}/status",
    response_model=ApiResponse[InquiryRead],
    summary="Change inquiry status",
    description="Any of: new, responded, booked, closed."
)
def update_inquiry_status(
    inquiry_id: uuid.UUID,
    data: InquiryStatusUpdate,
    current_user: User = Depends(require_client_or_admin),
    service: InquiryService = Depends(get_inquiry_service)
):
    inquiry = service.update_inquiry_status(current_user.id, inquiry_id, data.status)
    return ApiResponse.ok(inquiry, "Inquiry status updated successfully")


@router.delete(
    "/{inquiry_id}",
    response_model=ApiResponse[dict],
    summary="Delete one of your inquiries"
)
def delete_inquiry(
    inquiry_id: uuid.UUID,
    current_user: User = Depends(require_client_or_admin),
    service: InquiryService = Depends(get_inquiry_service)
):
    service.delete_inquiry(current_user.id, inquiry_id)
    return ApiResponse.ok({}, "Inquiry deleted successfully")
