import logging
import uuid
from datetime import datetime, timedelta
from typing import Optional
from sqlalchemy import func, or_
from sqlmodel import select, Session

from core.config import settings
from core.exceptions import NotFoundError
from core.security import IdentityPrincipal
from crud import allowed_emails as crud_allowed_emails
from models.allowed_emails import AllowedEmail
from models.revoked_users import RevokedUser
from models.users import User, UserRole
from schemas.allowed_emails import AllowedEmailCreate
from schemas.users import UserUpdate

logger = logging.getLogger(__name__)


def get_user_by_id(db: Session, user_id: uuid.UUID) -> Optional[User]:
    """Get user by ID."""
    return db.get(User, user_id)


def get_user_by_external_uid(db: Session, external_uid: str) -> Optional[User]:
    """Get user by identity-provider uid."""
    return db.exec(select(User).where(User.external_uid == external_uid)).first()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Get user by email address."""
    return db.exec(select(User).where(User.email == email.lower())).first()


def provision_user(
    db: Session,
    principal: IdentityPrincipal,
    email: Optional[str] = None,
    name: Optional[str] = None
) -> Optional[User]:
    """Find or create the local user for an identity principal.

    A user already registered under the same email is re-linked to the new
    uid. Returns None when the uid is unknown and no email is available.
    An ``admin`` claim on the token promotes the user.
    """
    user = get_user_by_external_uid(db, principal.uid)
    email = (email or principal.email or "").lower() or None
    name = name or principal.name

    if not user and email:
        user = get_user_by_email(db, email)
        if user:
            logger.info(f"Re-linking user {user.id} from uid {user.external_uid} to {principal.uid}")
            user.external_uid = principal.uid
        else:
            user = User(external_uid=principal.uid, email=email, name=name, role=UserRole.USER)
            logger.info(f"Creating user for uid {principal.uid}")

    if not user:
        return None

    if name and not user.name:
        user.name = name
    if principal.is_admin and not user.is_admin:
        logger.info(f"Promoting user {principal.uid} to admin from token claim")
        user.role = UserRole.ADMIN

    if user in db.dirty or user not in db:
        db.add(user)
        db.commit()
        db.refresh(user)
    return user


def list_users(
    db: Session,
    page: int = 1,
    limit: int = 10,
    role: UserRole = UserRole.USER,
    search: Optional[str] = None,
    is_allowed: Optional[bool] = None
) -> tuple[list[tuple[User, bool]], int]:
    """List users with their allow-list status, newest first.

    Returns the requested page and the total number of matches.
    """
    allowed = select(func.lower(AllowedEmail.email))
    query = select(User).where(User.role == role)

    if search:
        pattern = f"%{search.lower()}%"
        query = query.where(
            or_(func.lower(User.email).like(pattern), func.lower(User.name).like(pattern))
        )
    if is_allowed is True:
        query = query.where(func.lower(User.email).in_(allowed))
    elif is_allowed is False:
        query = query.where(func.lower(User.email).not_in(allowed))

    total = db.exec(select(func.count()).select_from(query.subquery())).one()
    users = db.exec(
        query.order_by(User.created_at.desc()).offset((page - 1) * limit).limit(limit)
    ).all()

    allowed_emails = set(db.exec(allowed).all())
    return [(user, user.email.lower() in allowed_emails) for user in users], total


def update_user(db: Session, user_id: uuid.UUID, user_data: UserUpdate) -> User:
    """Update a user's name or role."""
    user = get_user_by_id(db, user_id)
    if not user:
        raise NotFoundError("User not found")

    for key, value in user_data.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(user, key, value)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def set_user_allowed_status(db: Session, user_id: uuid.UUID, is_allowed: bool) -> User:
    """Allow or disallow a user.

    Allowing adds their email to the allow-list and lifts any revocation.
    Disallowing removes the entry and revokes their access.
    """
    user = get_user_by_id(db, user_id)
    if not user:
        raise NotFoundError("User not found")

    existing = crud_allowed_emails.get_allowed_email_by_email(db, user.email)
    if is_allowed:
        if not existing:
            crud_allowed_emails.create_allowed_email(
                db,
                AllowedEmailCreate(
                    email=user.email,
                    description=f"Auto-added for client {user.name or user.email}"
                ),
                created_by="system",
                commit=False
            )
        remove_user_from_revoked_list(db, user.external_uid, commit=False)
    else:
        if existing:
            db.delete(existing)
        add_user_to_revoked_list(db, user.external_uid, reason="User disallowed by admin", commit=False)

    db.commit()
    db.refresh(user)
    return user


def add_user_to_revoked_list(
    db: Session,
    external_uid: str,
    reason: Optional[str] = None,
    commit: bool = True
) -> RevokedUser:
    """Revoke a uid, refreshing the timestamp if already revoked."""
    logger.info(f"Adding user {external_uid} to revoked users")
    revoked = db.get(RevokedUser, external_uid)
    if revoked:
        revoked.revoked_at = datetime.now(settings.APP_TIMEZONE)
        revoked.reason = reason
    else:
        revoked = RevokedUser(external_uid=external_uid, reason=reason)
    db.add(revoked)
    if commit:
        db.commit()
        db.refresh(revoked)
    else:
        db.flush()
    return revoked


def remove_user_from_revoked_list(db: Session, external_uid: str, commit: bool = True) -> bool:
    """Lift a revocation. Returns whether one existed."""
    revoked = db.get(RevokedUser, external_uid)
    if not revoked:
        return False
    logger.info(f"Removing user {external_uid} from revoked users")
    db.delete(revoked)
    if commit:
        db.commit()
    else:
        db.flush()
    return True


def is_user_revoked(db: Session, external_uid: str) -> bool:
    """Check whether a uid is revoked."""
    return db.get(RevokedUser, external_uid) is not None


def cleanup_revoked_users(db: Session, max_age_hours: int = 24) -> int:
    """Delete revocations older than ``max_age_hours``. Returns the count."""
    cutoff = datetime.now(settings.APP_TIMEZONE) - timedelta(hours=max_age_hours)
    stale = db.exec(select(RevokedUser).where(RevokedUser.revoked_at < cutoff)).all()
    for revoked in stale:
        db.delete(revoked)
    db.commit()
    return len(stale)
