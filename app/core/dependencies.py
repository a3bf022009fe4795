from typing import Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlmodel import Session

from app.core.exceptions import ForbiddenError, UnauthorizedError
from app.db.core import get_session
from app.db.schema import User, UserRole
from app.services.user import UserService
from app.services.partner import PartnerService
from app.services.inquiry import InquiryService
from app.services.review import ReviewService
from app.services.portfolio import PortfolioService
from app.services.admin import AdminService

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def get_user_service(session: Session = Depends(get_session)) -> UserService:
    """Creates a UserService instance using the active DB session."""
    return UserService(session)


def get_partner_service(session: Session = Depends(get_session)) -> PartnerService:
    return PartnerService(session=session)


def get_inquiry_service(session: Session = Depends(get_session)) -> InquiryService:
    return InquiryService(session=session)


def get_review_service(session: Session = Depends(get_session)) -> ReviewService:
    return ReviewService(session=session)


def get_portfolio_service(session: Session = Depends(get_session)) -> PortfolioService:
    return PortfolioService(session=session)


def get_admin_service(session: Session = Depends(get_session)) -> AdminService:
    return AdminService(session=session)


def get_current_user(
    request: Request,
    bearer: Optional[str] = Depends(oauth2_scheme),
    service: UserService = Depends(get_user_service)
) -> User:
    """
    Resolves the caller from the 'accessToken' cookie or the Bearer header.
    This is the gatekeeper for protected routes.
    """
    token = request.cookies.get(ACCESS_COOKIE) or bearer
    if not token:
        raise UnauthorizedError("Unauthorized request")

    token_data = service.verify_access_token(token)
    if not token_data:
        raise UnauthorizedError("Invalid access token")

    user = service.get_user_by_id(token_data.user_id)
    if user is None:
        raise UnauthorizedError("Invalid access token")

    if not user.is_active:
        raise UnauthorizedError("Account is deactivated")

    return user


def require_roles(*roles: UserRole):
    """
    Dependency factory: the current user must hold one of `roles`.
    """
    def checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            raise ForbiddenError("Insufficient permissions")
        return current_user

    return checker


require_client = require_roles(UserRole.CLIENT)
require_partner = require_roles(UserRole.PARTNER)
require_admin = require_roles(UserRole.ADMIN)
require_client_or_admin = require_roles(UserRole.CLIENT, UserRole.ADMIN)
