#!/usr/bin/env python3
"""
Script to purge old entries from the revoked users table.
Meant to run periodically, e.g. from cron.
"""
import sys

from core.config import settings
from crud.users import cleanup_revoked_users
from db.session import SessionLocal


def main():
    """Main function to clean up revoked users."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Delete revoked-user entries older than a maximum age"
    )
    parser.add_argument(
        "--max-age-hours",
        type=int,
        default=settings.REVOKED_USER_MAX_AGE_HOURS,
        help=f"Maximum age in hours (default: {settings.REVOKED_USER_MAX_AGE_HOURS})"
    )

    args = parser.parse_args()

    db = SessionLocal()

    try:
        removed = cleanup_revoked_users(db, max_age_hours=args.max_age_hours)
        print(f"✓ Removed {removed} revoked user entries older than {args.max_age_hours}h")
    except Exception as e:
        print(f"✗ Error: {e}")
        db.rollback()
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    main()
