from typing import Optional
from pydantic import BaseModel, EmailStr, Field


class LoginRequest(BaseModel):
    """Profile sent alongside the identity token on sign-in."""
    name: Optional[str] = Field(None, max_length=100)
    email: Optional[EmailStr] = None


class AuthErrorDetail(BaseModel):
    message: str
    error: str
    code: Optional[str] = None


class AdminCheckResponse(BaseModel):
    is_admin: bool
