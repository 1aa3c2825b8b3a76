from __future__ import annotations
from datetime import datetime, timedelta, timezone
from jose import jwt, JWTError
from passlib.context import CryptContext
from pydantic import BaseModel, ValidationError
from tenders_map.core.config import settings

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)


class TokenError(Exception):
    """Token is malformed, badly signed, expired or carries unexpected claims."""


class TokenPayload(BaseModel):
    sub: str     # user id
    email: str
    iat: int
    exp: int


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    return pwd_context.verify(password, hashed)


def dummy_verify() -> None:
    # Burns one hash round so a missing account costs as much as a wrong password
    pwd_context.dummy_verify()


def normalize_email(value: str | None) -> str:
    return (value or "").strip().lower()


def create_access_token(user_id: int, email: str, expires_delta: timedelta | None = None) -> str:
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(days=settings.token_expire_days)
    payload = {
        "sub": str(user_id),
        "email": email,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_delta).timestamp()),
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> TokenPayload:
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
        data = TokenPayload(**payload)
    except (JWTError, ValidationError) as e:
        raise TokenError(str(e)) from e
    if not data.sub.isdigit():
        raise TokenError("Invalid subject")
    return data
