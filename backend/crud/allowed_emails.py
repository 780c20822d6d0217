import uuid
from typing import Optional
from sqlalchemy import func
from sqlmodel import select, Session

from core.exceptions import ConflictError, NotFoundError
from models.allowed_emails import AllowedEmail
from schemas.allowed_emails import AllowedEmailCreate, AllowedEmailUpdate


def list_allowed_emails(db: Session) -> list[AllowedEmail]:
    """List allow-list entries, newest first."""
    return list(db.exec(select(AllowedEmail).order_by(AllowedEmail.created_at.desc())).all())


def get_allowed_email(db: Session, allowed_email_id: uuid.UUID) -> AllowedEmail:
    """Get an allow-list entry by ID."""
    allowed_email = db.get(AllowedEmail, allowed_email_id)
    if not allowed_email:
        raise NotFoundError("Allowed email not found")
    return allowed_email


def get_allowed_email_by_email(db: Session, email: str) -> Optional[AllowedEmail]:
    """Get an allow-list entry by address (case-insensitive)."""
    return db.exec(
        select(AllowedEmail).where(func.lower(AllowedEmail.email) == email.lower())
    ).first()


def is_email_allowed(db: Session, email: str) -> bool:
    """Check whether an address is on the allow-list."""
    return get_allowed_email_by_email(db, email) is not None


def create_allowed_email(
    db: Session,
    allowed_email_data: AllowedEmailCreate,
    created_by: Optional[str] = None,
    commit: bool = True
) -> AllowedEmail:
    """Add an address to the allow-list."""
    email = allowed_email_data.email.lower()
    if get_allowed_email_by_email(db, email):
        raise ConflictError(f"Email '{email}' is already allowed")

    allowed_email = AllowedEmail(
        email=email,
        description=allowed_email_data.description,
        created_by=created_by
    )
    db.add(allowed_email)
    if commit:
        db.commit()
        db.refresh(allowed_email)
    else:
        db.flush()
    return allowed_email


def update_allowed_email(
    db: Session,
    allowed_email_id: uuid.UUID,
    allowed_email_data: AllowedEmailUpdate
) -> AllowedEmail:
    """Update an allow-list entry."""
    allowed_email = get_allowed_email(db, allowed_email_id)

    if allowed_email_data.email:
        email = allowed_email_data.email.lower()
        existing = get_allowed_email_by_email(db, email)
        if existing and existing.id != allowed_email.id:
            raise ConflictError(f"Email '{email}' is already allowed")
        allowed_email.email = email
    if allowed_email_data.description is not None:
        allowed_email.description = allowed_email_data.description

    db.add(allowed_email)
    db.commit()
    db.refresh(allowed_email)
    return allowed_email


def delete_allowed_email(db: Session, allowed_email_id: uuid.UUID) -> None:
    """Remove an allow-list entry."""
    allowed_email = get_allowed_email(db, allowed_email_id)
    db.delete(allowed_email)
    db.commit()
