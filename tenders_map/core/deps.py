from __future__ import annotations
from typing import Annotated, Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from tenders_map.db.session import get_db
from tenders_map.models.user import User
from tenders_map.core.security import decode_access_token, TokenError

# auto_error=False so a missing header is a 401 (not FastAPI's default 403)
bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """
    Decode the bearer token and fetch its user.
    Runs before any handler touches the store.
    """
    if credentials is None or not credentials.credentials:
        raise _unauthorized("Missing token")

    try:
        data = decode_access_token(credentials.credentials)
    except TokenError:
        raise _unauthorized("Invalid or expired token")

    user = db.get(User, int(data.sub))
    if not user:
        raise _unauthorized("Invalid or expired token")
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]
