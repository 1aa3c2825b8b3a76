from __future__ import annotations
import logging
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tenders_map.schemas.user import UserCreate, UserLogin, UserRead, TokenResponse, MeResponse
from tenders_map.schemas.common import OkResponse
from tenders_map.models.user import User
from tenders_map.core.security import (
    hash_password, verify_password, dummy_verify, create_access_token, normalize_email
)
from tenders_map.core.deps import CurrentUser
from tenders_map.core.config import settings
from tenders_map.db.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

# Same message for unknown email and wrong password
INVALID_CREDENTIALS = "Invalid email or password"


def find_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(func.lower(User.email) == normalize_email(email)).first()


def _token_response(user: User) -> TokenResponse:
    return TokenResponse(
        token=create_access_token(user.id, user.email),
        expires_in=settings.token_expire_days * 24 * 3600,
        user=UserRead.model_validate(user),
    )


@router.post("/login", response_model=TokenResponse)
def login(payload: UserLogin, db: Session = Depends(get_db)):
    identifier = normalize_email(payload.identifier)
    user = find_user_by_email(db, identifier) if identifier else None

    if user is None:
        dummy_verify()
        ok = False
    else:
        ok = verify_password(payload.password, user.password_hash)

    if not ok:
        logger.warning("Failed login for %r", identifier)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=INVALID_CREDENTIALS,
            headers={"WWW-Authenticate": "Bearer"},
        )

    logger.info("User %s logged in", user.id)
    return _token_response(user)


@router.get("/me", response_model=MeResponse)
def me(current_user: CurrentUser):
    return {"user": current_user}


async def registration_body(request: Request) -> UserCreate:
    # Accounts are provisioned by an administrator unless the policy says otherwise.
    # The body is only parsed once registration is open, so any input gets the same 403.
    if not settings.registration_enabled:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Registration is disabled")

    try:
        body = await request.json()
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Request body must be JSON")
    try:
        return UserCreate.model_validate(body)
    except ValidationError as e:
        raise RequestValidationError(e.errors())


@router.post("/register", response_model=TokenResponse, status_code=201)
def register(data: UserCreate = Depends(registration_body), db: Session = Depends(get_db)):
    email = normalize_email(data.email)
    if find_user_by_email(db, email):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")

    user = User(email=email, password_hash=hash_password(data.password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")
    db.refresh(user)
    logger.info("Registered user %s", user.id)
    return _token_response(user)


@router.post("/logout", response_model=OkResponse)
def logout():
    # Tokens are stateless; the client forgets its copy.
    return OkResponse()
