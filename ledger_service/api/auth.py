"""
Auth API endpoints.
Handles registration and login.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ledger_service.core.security import create_access_token
from ledger_service.database import get_db
from ledger_service.schemas.user import UserRegister, UserLogin, RegisteredUser, Token
from ledger_service.services.users import authenticate, register_user

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", response_model=RegisteredUser, status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserRegister,
    db: Session = Depends(get_db)
):
    """
    Register a user. The first account is opened automatically.

    - **name**: Display name
    - **email**: Login email (unique)
    - **password**: At least 6 characters, containing a number
    """
    user, account = register_user(db, user_data.name, user_data.email, user_data.password)
    return RegisteredUser(
        user_id=user.id,
        name=user.name,
        email=user.email,
        account_number=account.account_number
    )


@router.post("/login", response_model=Token)
def login(
    credentials: UserLogin,
    db: Session = Depends(get_db)
):
    """
    Exchange email and password for a bearer token.
    """
    user = authenticate(db, credentials.email, credentials.password)
    return Token(access_token=create_access_token(user.id), user_id=user.id)
