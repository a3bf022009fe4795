from typing import Optional

from fastapi import APIRouter, Depends, Request, Response, status
from loguru import logger

from app.core.config import settings
from app.core.dependencies import (
    ACCESS_COOKIE, REFRESH_COOKIE, get_user_service, get_current_user
)
from app.core.responses import ApiResponse
from app.services.user import UserService
from app.db.schema import User
from app.models.auth import Token, TokenRefresh, LoginResult, OtpRequest, OtpVerify, OtpIssued
from app.models.user import UserSignin, UserRead, UserCreate


router = APIRouter()


def _set_auth_cookies(response: Response, tokens: Token) -> None:
    """HTTP-only, SameSite=strict; Secure when configured."""
    options = dict(httponly=True, secure=settings.cookie_secure, samesite="strict")
    response.set_cookie(
        ACCESS_COOKIE, tokens.access_token,
        max_age=settings.access_token_expire_minutes * 60, **options)
    response.set_cookie(
        REFRESH_COOKIE, tokens.refresh_token,
        max_age=settings.refresh_token_expire_minutes * 60, **options)


def _clear_auth_cookies(response: Response) -> None:
    options = dict(httponly=True, secure=settings.cookie_secure, samesite="strict")
    response.delete_cookie(ACCESS_COOKIE, **options)
    response.delete_cookie(REFRESH_COOKIE, **options)


def _login_result(user: User, tokens: Token) -> LoginResult:
    return LoginResult(
        user=UserRead.model_validate(user),
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
    )


@router.post(
    "/signup",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[UserRead],
    summary="Register a new user",
    description="Creates a client or partner account. Partners onboard separately."
)
def signup(
    user_in: UserCreate,
    service: UserService = Depends(get_user_service)
):
    new_user = service.create_user(user_in)
    return ApiResponse.created(UserRead.model_validate(new_user), "User registered successfully")


@router.post(
    "/login",
    response_model=ApiResponse[LoginResult],
    status_code=status.HTTP_200_OK,
    summary="Sign in with email and password",
    description="Returns an Access Token (short-lived) and Refresh Token (long-lived), also set as cookies."
)
def login(
    signin_data: UserSignin,
    response: Response,
    service: UserService = Depends(get_user_service)
):
    user = service.authenticate_user(signin_data.email, signin_data.password)
    tokens = service.generate_tokens(user)
    _set_auth_cookies(response, tokens)

    logger.info(f"User logged in: {user.id}")
    return ApiResponse.ok(_login_result(user, tokens), "User logged in successfully")


@router.post(
    "/send-otp",
    response_model=ApiResponse[OtpIssued],
    summary="Request a one-time passcode",
)
def send_otp(
    otp_request: OtpRequest,
    service: UserService = Depends(get_user_service)
):
    issued = service.issue_otp(otp_request.email)
    return ApiResponse.ok(issued, "OTP sent successfully")


@router.post(
    "/verify-otp",
    response_model=ApiResponse[LoginResult],
    summary="Sign in with a one-time passcode",
)
def verify_otp(
    otp_verify: OtpVerify,
    response: Response,
    service: UserService = Depends(get_user_service)
):
    user = service.verify_otp(otp_verify.email, otp_verify.otp)
    tokens = service.generate_tokens(user)
    _set_auth_cookies(response, tokens)

    logger.info(f"User logged in with OTP: {user.id}")
    return ApiResponse.ok(_login_result(user, tokens), "OTP verified successfully")


@router.post(
    "/refresh-token",
    response_model=ApiResponse[Token],
    status_code=status.HTTP_200_OK,
    summary="Refresh Session",
    description="Exchanges the current Refresh Token (cookie or body) for a new pair of tokens."
)
def refresh_token(
    request: Request,
    response: Response,
    refresh_data: Optional[TokenRefresh] = None,
    service: UserService = Depends(get_user_service)
):
    """
    Rotation: the presented token must be the one stored for the user;
    once exchanged it can never be used again.
    """
    presented = request.cookies.get(REFRESH_COOKIE) or (
        refresh_data.refresh_token if refresh_data else None)
    _, tokens = service.refresh_session(presented)
    _set_auth_cookies(response, tokens)
    return ApiResponse.ok(tokens, "Access token refreshed")


@router.post(
    "/logout",
    response_model=ApiResponse[dict],
    summary="Sign out",
)
def logout(
    response: Response,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    service.logout(current_user)
    _clear_auth_cookies(response)
    return ApiResponse.ok({}, "User logged out successfully")


@router.get(
    "/profile",
    response_model=ApiResponse[UserRead],
    status_code=status.HTTP_200_OK,
    summary="Get current user",
    description="Returns the profile information of the currently authenticated user."
)
def get_profile(
    current_user: User = Depends(get_current_user)
):
    return ApiResponse.ok(UserRead.model_validate(current_user), "User profile fetched successfully")
