"""
Pydantic schemas for registration and login.
"""

from pydantic import BaseModel, Field, ConfigDict, field_validator

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class UserRegister(BaseModel):
    """Schema for registering a user."""
    name: str = Field(..., min_length=1, max_length=100, description="Display name")
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN, description="Login email")
    password: str = Field(..., min_length=6, max_length=128, description="At least 6 characters with a number")

    @field_validator("password")
    @classmethod
    def password_has_digit(cls, value: str) -> str:
        if not any(ch.isdigit() for ch in value):
            raise ValueError("Password must contain a number")
        return value

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Jane Doe",
                "email": "jane@example.com",
                "password": "password123"
            }
        }
    )


class UserLogin(BaseModel):
    """Schema for logging in."""
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=1)


class RegisteredUser(BaseModel):
    """Schema for registration response."""
    user_id: int
    name: str
    email: str
    account_number: str


class Token(BaseModel):
    """Schema for login response."""
    access_token: str
    token_type: str = "bearer"
    user_id: int
