import logging
import uuid
from typing import Annotated, Optional
from sqlmodel import Session
from fastapi import Depends, HTTPException, Query, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from db.session import get_db
from core.security import (
    IdentityPrincipal,
    InvalidTokenError,
    TokenExpiredError,
    verify_identity_token,
)
from crud import allowed_emails as crud_allowed_emails
from crud import permissions as crud_permissions
from crud import users as crud_users
from models.restaurants import Restaurant
from models.users import User
from services.sms import SmsService, sms_service

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

SessionDep = Annotated[Session, Depends(get_db)]


def auth_error(status_code: int, message: str, code: Optional[str] = None, **extra) -> HTTPException:
    """Structured authentication failure: ``{message, error, code}``."""
    detail = {
        "message": message,
        "error": "Unauthorized" if status_code == status.HTTP_401_UNAUTHORIZED else "Forbidden",
    }
    if code:
        detail["code"] = code
    detail.update(extra)
    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return HTTPException(status_code=status_code, detail=detail, headers=headers)


def decode_principal(token: str) -> IdentityPrincipal:
    """Verify a raw token, mapping failures to 401 responses."""
    try:
        return verify_identity_token(token)
    except TokenExpiredError:
        raise auth_error(status.HTTP_401_UNAUTHORIZED, "Token expired", "AUTH_TOKEN_EXPIRED")
    except InvalidTokenError as e:
        logger.warning(f"Rejected identity token: {e}")
        raise auth_error(status.HTTP_401_UNAUTHORIZED, "Invalid token", "AUTH_INVALID_TOKEN")


def get_identity_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> IdentityPrincipal:
    """Identity of the caller, before any local account checks."""
    if credentials is None:
        raise auth_error(status.HTTP_401_UNAUTHORIZED, "Not authenticated", "AUTH_MISSING_TOKEN")
    return decode_principal(credentials.credentials)


PrincipalDep = Annotated[IdentityPrincipal, Depends(get_identity_principal)]


def check_revocation(db: Session, principal: IdentityPrincipal, user: Optional[User]) -> None:
    """Reject revoked identities. Admins are cleared from the list instead."""
    if not crud_users.is_user_revoked(db, principal.uid):
        return

    if principal.is_admin or (user is not None and user.is_admin):
        logger.info(f"Clearing revocation for admin {principal.uid}")
        crud_users.remove_user_from_revoked_list(db, principal.uid)
        return

    raise auth_error(
        status.HTTP_401_UNAUTHORIZED,
        "Your account has been deactivated",
        "AUTH_USER_DEACTIVATED",
    )


def authenticate(db: Session, principal: IdentityPrincipal) -> User:
    """Resolve a verified principal to an allowed local user."""
    existing = crud_users.get_user_by_external_uid(db, principal.uid)
    check_revocation(db, principal, existing)

    user = crud_users.provision_user(db, principal)
    if user is None:
        raise auth_error(status.HTTP_403_FORBIDDEN, "User not found")

    if not user.is_admin and not crud_allowed_emails.is_email_allowed(db, user.email):
        raise auth_error(
            status.HTTP_403_FORBIDDEN,
            "Your account is pending approval",
            "AUTH_USER_PENDING_APPROVAL",
        )
    return user


def get_current_user(principal: PrincipalDep, db: SessionDep) -> User:
    """Get the current allowed user from the bearer token."""
    return authenticate(db, principal)


CurrentUser = Annotated[User, Depends(get_current_user)]


def get_current_admin(current_user: CurrentUser) -> User:
    """Require the current user to be an admin."""
    if not current_user.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return current_user


AdminUser = Annotated[User, Depends(get_current_admin)]


def get_accessible_restaurant(
    current_user: CurrentUser,
    db: SessionDep,
    restaurant_id: uuid.UUID = Query(..., alias="restaurantId"),
) -> Restaurant:
    """Restaurant named by ``?restaurantId=`` if the caller may manage it."""
    return crud_permissions.check_restaurant_permission(db, restaurant_id, current_user)


RestaurantDep = Annotated[Restaurant, Depends(get_accessible_restaurant)]


def get_sms_service() -> SmsService:
    return sms_service


SmsServiceDep = Annotated[SmsService, Depends(get_sms_service)]
