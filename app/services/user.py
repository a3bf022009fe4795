from typing import Optional
import uuid
import hashlib
import secrets
from datetime import datetime, timedelta

import jwt
from loguru import logger
from sqlmodel import Session, select

from app.core.config import settings
from app.core.exceptions import (
    BadRequestError, ConflictError, ForbiddenError, NotFoundError, UnauthorizedError
)
from app.db.schema import User, UserRole, OtpCredential
from app.models.auth import Token, TokenData, OtpIssued
from app.models.user import UserCreate
from .password import get_password_hash, verify_password


def _digest(code: str) -> str:
    return hashlib.sha256(code.encode("utf-8")).hexdigest()


class UserService:
    ALGORITHM = "HS256"

    def __init__(self, session: Session):
        self.session = session

    def _create_jwt(self, subject: str, expires_delta: timedelta, type: str, **claims) -> str:
        """Helper to sign JWTs with specific types."""
        to_encode = {
            "sub": str(subject),
            "exp": datetime.utcnow() + expires_delta,
            "type": type,
            # Two tokens minted in the same second must still differ
            "jti": secrets.token_hex(8),
            **claims
        }
        return jwt.encode(to_encode, settings.secret_key, algorithm=self.ALGORITHM)

    def _decode(self, token: str, expected_type: str) -> Optional[TokenData]:
        try:
            payload = jwt.decode(token, settings.secret_key,
                                 algorithms=[self.ALGORITHM])
            user_id = payload.get("sub")
            token_type = payload.get("type")

            if not user_id or token_type != expected_type:
                return None

            return TokenData(user_id=uuid.UUID(user_id), role=payload.get("role"))
        except (jwt.PyJWTError, ValueError):
            return None

    def get_user_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        return self.session.get(User, user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        statement = select(User).where(User.email == email.strip().lower())
        return self.session.exec(statement).first()

    # ==========================================================================
    # REGISTRATION & PASSWORD LOGIN
    # ==========================================================================

    def create_user(self, user_in: UserCreate) -> User:
        if user_in.role == UserRole.ADMIN:
            # Admins are provisioned by seed.py only
            raise ForbiddenError("Admin accounts cannot be created through signup")
        if self.get_user_by_email(user_in.email):
            raise ConflictError("User with email already exists")

        new_user = User(
            email=user_in.email.lower(),
            hashed_password=get_password_hash(user_in.password),
            name=user_in.name,
            role=user_in.role or UserRole.CLIENT,
            phone=user_in.phone,
            is_active=True
        )
        self.session.add(new_user)
        self.session.commit()
        self.session.refresh(new_user)

        logger.info(f"New user registered: {new_user.email} ({new_user.role.value})")
        return new_user

    def authenticate_user(self, email: str, password: str) -> User:
        """Verify email and password hash."""
        user = self.get_user_by_email(email)
        if not user:
            raise NotFoundError("User does not exist")
        if not verify_password(password, user.hashed_password):
            logger.warning(f"Failed password login for {user.email}")
            raise UnauthorizedError("Invalid user credentials")
        if not user.is_active:
            raise UnauthorizedError("Account is deactivated")

        logger.info(f"User authenticated: {user.email}")
        return user

    # ==========================================================================
    # TOKENS
    # ==========================================================================

    def generate_access_token(self, user: User) -> str:
        return self._create_jwt(
            subject=user.id,
            expires_delta=timedelta(
                minutes=settings.access_token_expire_minutes),
            type="access",
            role=user.role.value
        )

    def generate_refresh_token(self, user: User) -> str:
        return self._create_jwt(
            subject=user.id,
            expires_delta=timedelta(
                minutes=settings.refresh_token_expire_minutes),
            type="refresh"
        )

    def generate_tokens(self, user: User) -> Token:
        """
        Issues a fresh access/refresh pair and stores the refresh token
        on the user, replacing (revoking) any previous one.
        """
        tokens = Token(
            access_token=self.generate_access_token(user),
            refresh_token=self.generate_refresh_token(user),
            token_type="bearer"
        )
        user.refresh_token = tokens.refresh_token
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        return tokens

    def verify_access_token(self, token: str) -> Optional[TokenData]:
        return self._decode(token, "access")

    def verify_refresh_token(self, token: str) -> Optional[TokenData]:
        return self._decode(token, "refresh")

    def refresh_session(self, refresh_token: Optional[str]) -> tuple[User, Token]:
        """
        Exchange a valid refresh token for a new token pair.
        The presented token must be the one currently stored for the user.
        """
        if not refresh_token:
            raise UnauthorizedError("Refresh token required")

        token_data = self.verify_refresh_token(refresh_token)
        if not token_data:
            raise UnauthorizedError("Invalid or expired refresh token")

        user = self.get_user_by_id(token_data.user_id)
        if not user or not user.is_active:
            raise UnauthorizedError("Invalid refresh token")

        if user.refresh_token != refresh_token:
            logger.warning(f"Stale refresh token presented for user {user.id}")
            raise UnauthorizedError("Refresh token is expired or used")

        return user, self.generate_tokens(user)

    def logout(self, user: User) -> None:
        user.refresh_token = None
        self.session.add(user)
        self.session.commit()
        logger.info(f"User logged out: {user.id}")

    # ==========================================================================
    # ONE-TIME PASSCODES
    # ==========================================================================

    def _get_otp(self, user_id: uuid.UUID) -> Optional[OtpCredential]:
        return self.session.get(OtpCredential, user_id)

    def issue_otp(self, email: str) -> OtpIssued:
        """
        Generates a 6-digit code for the user, replacing any previous code
        and resetting the failed-attempt counter.
        """
        user = self.get_user_by_email(email)
        if not user:
            raise NotFoundError("User not found")

        code = f"{secrets.randbelow(900000) + 100000}"
        credential = self._get_otp(user.id)
        if credential is None:
            credential = OtpCredential(user_id=user.id, code_hash="", expires_at=datetime.utcnow())

        credential.code_hash = _digest(code)
        credential.expires_at = datetime.utcnow() + timedelta(
            minutes=settings.otp_expire_minutes)
        credential.attempts = 0
        self.session.add(credential)
        self.session.commit()

        # Delivery is mocked: the code goes to the application log
        logger.info(f"OTP MOCK: code for {user.email} is {code}")

        return OtpIssued(
            email=user.email,
            expires_in_minutes=settings.otp_expire_minutes,
            otp=code if settings.debug else None
        )

    def verify_otp(self, email: str, code: str) -> User:
        user = self.get_user_by_email(email)
        if not user:
            raise NotFoundError("User not found")

        credential = self._get_otp(user.id)
        if credential is None:
            raise BadRequestError("No OTP found. Please request a new one.")

        if datetime.utcnow() > credential.expires_at:
            raise BadRequestError("OTP has expired. Please request a new one.")

        if credential.attempts >= settings.otp_max_attempts:
            raise BadRequestError(
                "Too many failed attempts. Please request a new OTP.")

        if not secrets.compare_digest(credential.code_hash, _digest(code.strip())):
            credential.attempts += 1
            self.session.add(credential)
            self.session.commit()
            logger.warning(
                f"Invalid OTP for {user.email} (attempt {credential.attempts})")
            raise BadRequestError("Invalid OTP. Please try again.")

        # Consumed: a code is only good once
        self.session.delete(credential)
        self.session.commit()
        logger.info(f"OTP verified for {user.email}")
        return user
