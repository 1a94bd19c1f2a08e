"""Auth router — login for users and teachers, logout, current principal."""

import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from classroll.database import get_db
from classroll.errors import UnauthorizedError
from classroll.middleware.auth import (
    Principal,
    clear_auth_cookie,
    create_access_token,
    get_current_principal,
    set_auth_cookie,
    verify_password,
)
from classroll.models.teacher import Teacher
from classroll.models.user import User
from classroll.schemas.auth import (
    AccountInfo,
    LoginRequest,
    MessageResponse,
    PrincipalResponse,
    TokenResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _issue_token(response: Response, account, account_type: str) -> TokenResponse:
    """Sign a token whose role claim is "<role>:<id>" and mirror it into the cookie."""
    role_claim = f"{account.role}:{account.id}"
    token = create_access_token({
        "sub": account.id,
        "email": account.email,
        "role": role_claim,
        "type": account_type,
    })
    set_auth_cookie(response, token)
    logger.info(f"Login: {account_type} {account.id}")
    return TokenResponse(
        token=token,
        user=AccountInfo(
            id=account.id,
            email=account.email,
            name=account.name,
            role=account.role,
            type=account_type,
        ),
    )


def _invalid_credentials() -> UnauthorizedError:
    return UnauthorizedError("Invalid credentials")


@router.post("", response_model=TokenResponse)
def login(req: LoginRequest, response: Response, db: Session = Depends(get_db)):
    """Log in as either a user or a teacher; users are looked up first."""
    user = db.query(User).filter(User.email == req.email).first()
    if user:
        if not verify_password(req.password, user.password):
            raise _invalid_credentials()
        return _issue_token(response, user, "user")

    teacher = db.query(Teacher).filter(Teacher.email == req.email).first()
    if not teacher or not verify_password(req.password, teacher.password):
        raise _invalid_credentials()
    return _issue_token(response, teacher, "teacher")


@router.post("/user", response_model=TokenResponse)
def login_user(req: LoginRequest, response: Response, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == req.email).first()
    if not user or not verify_password(req.password, user.password):
        raise _invalid_credentials()
    return _issue_token(response, user, "user")


@router.post("/teacher", response_model=TokenResponse)
def login_teacher(req: LoginRequest, response: Response, db: Session = Depends(get_db)):
    teacher = db.query(Teacher).filter(Teacher.email == req.email).first()
    if not teacher or not verify_password(req.password, teacher.password):
        raise _invalid_credentials()
    return _issue_token(response, teacher, "teacher")


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response):
    clear_auth_cookie(response)
    return MessageResponse(message="Logout successful")


@router.get("/me", response_model=PrincipalResponse)
def get_me(principal: Principal = Depends(get_current_principal)):
    return PrincipalResponse(
        id=principal.id,
        email=principal.email,
        role=principal.role,
        type=principal.account_type,
    )
