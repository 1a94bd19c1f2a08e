"""JWT/cookie authentication and role dependencies."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from fastapi import Depends, Request, Response
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt

from classroll.config import settings
from classroll.errors import ForbiddenError, UnauthorizedError
from classroll.services.authorization import RoleClaim, parse_role_claim

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    """Hash a password using bcrypt directly."""
    pwd_bytes = password.encode("utf-8")
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(pwd_bytes, salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a bcrypt hash."""
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"),
            hashed_password.encode("utf-8"),
        )
    except ValueError:
        # not a bcrypt hash
        return False


def create_access_token(data: dict) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise UnauthorizedError("Invalid or expired token")


def set_auth_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        path="/",
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


def clear_auth_cookie(response: Response) -> None:
    response.delete_cookie(key=settings.AUTH_COOKIE_NAME, path="/")


@dataclass
class Principal:
    """The authenticated caller, decoded once from the token."""

    id: str
    email: str
    claim: RoleClaim
    account_type: str  # "user" | "teacher"
    payload: dict = field(default_factory=dict, repr=False)

    @property
    def role(self) -> str:
        return self.claim.raw

    @property
    def is_admin(self) -> bool:
        return self.claim.is_admin

    @property
    def is_teacher(self) -> bool:
        return self.claim.is_teacher


def _token_from_request(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials],
) -> Optional[str]:
    if credentials and credentials.credentials:
        return credentials.credentials
    # bare "Authorization: <jwt>" without the Bearer scheme
    header = request.headers.get("Authorization", "").strip()
    if header and " " not in header:
        return header
    return request.cookies.get(settings.AUTH_COOKIE_NAME)


def _principal_from_token(token: str) -> Principal:
    payload = decode_token(token)
    claim = parse_role_claim(payload.get("role"))
    subject = payload.get("sub")
    if not subject or claim is None:
        raise UnauthorizedError("Invalid token payload")

    return Principal(
        id=subject,
        email=payload.get("email", ""),
        claim=claim,
        account_type=payload.get("type", "user"),
        payload=payload,
    )


def get_current_principal(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Principal:
    token = _token_from_request(request, credentials)
    if not token:
        raise UnauthorizedError()
    return _principal_from_token(token)


def get_optional_principal(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[Principal]:
    """Like ``get_current_principal`` for public routes: None when no token is sent."""
    token = _token_from_request(request, credentials)
    if not token:
        return None
    return _principal_from_token(token)


def require_teacher_or_admin(principal: Principal = Depends(get_current_principal)) -> Principal:
    if not (principal.is_teacher or principal.is_admin):
        raise ForbiddenError("Only teachers or admins can perform this action")
    return principal


def require_teacher(principal: Principal = Depends(get_current_principal)) -> Principal:
    if not principal.is_teacher:
        raise ForbiddenError("Only teachers can perform this action")
    return principal


def ensure_can_manage(principal: Principal, owner_id: Optional[str], message: str) -> None:
    """403 unless the caller is an admin or the teacher owning the resource."""
    if not principal.claim.can_manage(owner_id, logger):
        raise ForbiddenError(message)
