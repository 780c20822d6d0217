import uuid
from fastapi import APIRouter

from api.deps import SessionDep, AdminUser
from crud import allowed_emails as crud_allowed_emails
from schemas.allowed_emails import AllowedEmailCreate, AllowedEmailUpdate, AllowedEmailResponse

router = APIRouter(prefix="/allowed-emails", tags=["allowed-emails"])


@router.get("", response_model=list[AllowedEmailResponse])
def list_allowed_emails(admin: AdminUser, db: SessionDep):
    """List allow-list entries."""
    return crud_allowed_emails.list_allowed_emails(db)


@router.post("", response_model=AllowedEmailResponse, status_code=201)
def create_allowed_email(allowed_email_data: AllowedEmailCreate, admin: AdminUser, db: SessionDep):
    """Add an email to the allow-list."""
    return crud_allowed_emails.create_allowed_email(db, allowed_email_data, created_by=admin.email)


@router.get("/{allowed_email_id}", response_model=AllowedEmailResponse)
def get_allowed_email(allowed_email_id: uuid.UUID, admin: AdminUser, db: SessionDep):
    """Get an allow-list entry."""
    return crud_allowed_emails.get_allowed_email(db, allowed_email_id)


@router.patch("/{allowed_email_id}", response_model=AllowedEmailResponse)
def update_allowed_email(
    allowed_email_id: uuid.UUID,
    allowed_email_data: AllowedEmailUpdate,
    admin: AdminUser,
    db: SessionDep
):
    """Update an allow-list entry."""
    return crud_allowed_emails.update_allowed_email(db, allowed_email_id, allowed_email_data)


@router.delete("/{allowed_email_id}", status_code=204)
def delete_allowed_email(allowed_email_id: uuid.UUID, admin: AdminUser, db: SessionDep):
    """Remove an email from the allow-list."""
    crud_allowed_emails.delete_allowed_email(db, allowed_email_id)
    return None
