import logging
from fastapi import APIRouter, status

from api.deps import SessionDep, CurrentUser, PrincipalDep, auth_error, check_revocation
from crud import allowed_emails as crud_allowed_emails
from crud import users as crud_users
from schemas.auth import LoginRequest, AdminCheckResponse
from schemas.users import UserResponse, UserWithAccessResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=UserWithAccessResponse)
def login(login_data: LoginRequest, principal: PrincipalDep, db: SessionDep):
    """Sign in with an identity token.

    Creates or re-links the local user. Users whose email is not on the
    allow-list get a 401 carrying their profile so the client can show a
    pending-approval screen.
    """
    existing = crud_users.get_user_by_external_uid(db, principal.uid)
    check_revocation(db, principal, existing)

    user = crud_users.provision_user(db, principal, email=login_data.email, name=login_data.name)
    if user is None:
        raise auth_error(status.HTTP_403_FORBIDDEN, "User not found")

    is_allowed = user.is_admin or crud_allowed_emails.is_email_allowed(db, user.email)
    response = UserWithAccessResponse.model_validate(user).model_copy(update={"is_allowed": is_allowed})

    if not is_allowed:
        logger.info(f"Login by {user.email} pending approval")
        raise auth_error(
            status.HTTP_401_UNAUTHORIZED,
            "Your account is pending approval",
            "AUTH_USER_PENDING_APPROVAL",
            user=response.model_dump(mode="json"),
        )
    return response


@router.post("/check-admin", response_model=AdminCheckResponse)
def check_admin(principal: PrincipalDep, db: SessionDep):
    """Confirm the token belongs to an admin."""
    user = crud_users.get_user_by_external_uid(db, principal.uid)
    if not user or not user.is_admin:
        raise auth_error(status.HTTP_401_UNAUTHORIZED, "Admin access required", "AUTH_NOT_ADMIN")
    return AdminCheckResponse(is_admin=True)


@router.get("/me", response_model=UserResponse)
def get_current_user_info(current_user: CurrentUser):
    """Get current user information."""
    return current_user
