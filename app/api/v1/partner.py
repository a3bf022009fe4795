import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from app.core.dependencies import (
    require_partner, get_partner_service, get_inquiry_service, get_portfolio_service
)
from app.core.responses import ApiResponse
from app.db.schema import User
from app.models.partner import PartnerOnboard, PartnerUpdate, PartnerRead
from app.models.inquiry import InquiryRead, LeadList, LeadResponse
from app.models.portfolio import (
    PortfolioCreate, PortfolioUpdate, PortfolioRead, PortfolioList
)
from app.services.partner import PartnerService
from app.services.inquiry import InquiryService
from app.services.portfolio import PortfolioService


router = APIRouter()


# ==========================================
# ONBOARDING & PROFILE
# ==========================================

@router.post(
    "/onboard",
    response_model=ApiResponse[PartnerRead],
    status_code=status.HTTP_201_CREATED,
    summary="Submit business profile for verification",
    description="Creates the partner profile in 'pending' status. An admin must verify it before leads arrive."
)
def onboard(
    data: PartnerOnboard,
    current_user: User = Depends(require_partner),
    service: PartnerService = Depends(get_partner_service)
):
    partner = service.onboard_partner(current_user.id, data)
    return ApiResponse.created(partner, "Partner profile submitted for verification")


@router.get(
    "/profile",
    response_model=ApiResponse[PartnerRead],
    summary="Get own partner profile"
)
def get_profile(
    current_user: User = Depends(require_partner),
    service: PartnerService = Depends(get_partner_service)
):
    return ApiResponse.ok(service.get_profile(current_user.id), "Partner profile fetched successfully")


@router.put(
    "/profile",
    response_model=ApiResponse[PartnerRead],
    summary="Update own partner profile"
)
def update_profile(
    data: PartnerUpdate,
    current_user: User = Depends(require_partner),
    service: PartnerService = Depends(get_partner_service)
):
    return ApiResponse.ok(service.update_profile(current_user.id, data), "Partner profile updated successfully")


# ==========================================
# LEADS
# ==========================================

@router.get(
    "/leads",
    response_model=ApiResponse[LeadList],
    summary="List assigned leads",
    description="Only available once the partner profile is verified."
)
def list_leads(
    status_filter: Optional[str] = Query(default=None, alias="status"),
    current_user: User = Depends(require_partner),
    service: InquiryService = Depends(get_inquiry_service)
):
    return ApiResponse.ok(service.list_leads(current_user.id, status_filter), "Leads fetched successfully")


@router.get(
    "/leads/{lead_id}",
    response_model=ApiResponse[InquiryRead],
    summary="Get a single assigned lead"
)
def get_lead(
    lead_id: uuid.UUID,
    current_user: User = Depends(require_partner),
    service: InquiryService = Depends(get_inquiry_service)
):
    return ApiResponse.ok(service.get_lead(current_user.id, lead_id), "Lead fetched successfully")


@router.put(
    "/leads/{lead_id}/respond",
    response_model=ApiResponse[InquiryRead],
    summary="Respond to a lead",
    description="Records the partner's response and moves the inquiry status (default 'responded')."
)
def respond_to_lead(
    lead_id: uuid.UUID,
    data: LeadResponse,
    current_user: User = Depends(require_partner),
    service: InquiryService = Depends(get_inquiry_service)
):
    inquiry = service.respond_to_lead(
        current_user.id, lead_id, data.response_message, data.status)
    return ApiResponse.ok(inquiry, "Response sent successfully")


# ==========================================
# PORTFOLIO
# ==========================================

@router.post(
    "/portfolio",
    response_model=ApiResponse[PortfolioRead],
    status_code=status.HTTP_201_CREATED,
    summary="Add a portfolio item"
)
def add_portfolio_item(
    data: PortfolioCreate,
    current_user: User = Depends(require_partner),
    service: PortfolioService = Depends(get_portfolio_service)
):
    return ApiResponse.created(service.add_item(current_user.id, data), "Portfolio item added successfully")


@router.get(
    "/portfolio",
    response_model=ApiResponse[PortfolioList],
    summary="List own portfolio"
)
def list_portfolio(
    current_user: User = Depends(require_partner),
    service: PortfolioService = Depends(get_portfolio_service)
):
    return ApiResponse.ok(service.list_items(current_user.id), "Portfolio fetched successfully")


@router.put(
    "/portfolio/{item_id}",
    response_model=ApiResponse[PortfolioRead],
    summary="Update a portfolio item"
)
def update_portfolio_item(
    item_id: uuid.UUID,
    data: PortfolioUpdate,
    current_user: User = Depends(require_partner),
    service: PortfolioService = Depends(get_portfolio_service)
):
    return ApiResponse.ok(service.update_item(current_user.id, item_id, data), "Portfolio item updated successfully")


@router.delete(
    "/portfolio/{item_id}",
    response_model=ApiResponse[dict],
    summary="Delete a portfolio item"
)
def delete_portfolio_item(
    item_id: uuid.UUID,
    current_user: User = Depends(require_partner),
    service: PortfolioService = Depends(get_portfolio_service)
):
    service.delete_item(current_user.id, item_id)
    return ApiResponse.ok({}, "Portfolio item deleted successfully")
