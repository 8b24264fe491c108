"""
Request dependencies shared by the routers.
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from ledger_service.core.exceptions import UserNotFound
from ledger_service.core.security import decode_access_token
from ledger_service.database import get_db
from ledger_service.models.user import User
from ledger_service.services.users import get_user

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthenticated(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> User:
    """
    Resolve the authenticated caller from the bearer token.
    A valid token for a user that no longer exists is rejected too.
    """
    if credentials is None:
        raise _unauthenticated("Not authenticated")

    user_id = decode_access_token(credentials.credentials)
    if user_id is None:
        raise _unauthenticated("Invalid token")
    try:
        return get_user(db, user_id)
    except UserNotFound:
        raise _unauthenticated("Invalid token")
