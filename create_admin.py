#!/usr/bin/env python3
"""
Create the first dashboard user.
Usage: python create_admin.py <email> <name> [role]
The password is read from the prompt, never from the command line.
"""

import getpass
import logging
import sys

from sqlalchemy.exc import SQLAlchemyError

from poolcare.auth import hash_password
from poolcare.database import Base, SessionLocal, engine
from poolcare.domain.cleaners.repository import CleanerRepository
from poolcare.models import USER_ROLES, DashboardUser
from poolcare.shared.validators import validate_email

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)


def create_admin(email: str, name: str, password: str, role: str = "admin") -> DashboardUser:
    Base.metadata.create_all(bind=engine, checkfirst=True)
    db = SessionLocal()

    try:
        email = validate_email(email)
        if CleanerRepository.email_in_use(db, email):
            raise ValueError(f"Email {email} is already registered")

        user = DashboardUser(email=email, name=name, role=role, password_hash=hash_password(password))
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    if len(sys.argv) < 3:
        logger.error("Usage: python create_admin.py <email> <name> [role]")
        sys.exit(1)

    role = sys.argv[3] if len(sys.argv) > 3 else "admin"
    if role not in USER_ROLES:
        logger.error(f"Role must be one of: {', '.join(USER_ROLES)}")
        sys.exit(1)

    password = getpass.getpass("Password: ")
    if len(password) < 8 or password != getpass.getpass("Confirm password: "):
        logger.error("❌ Passwords must match and have at least 8 characters")
        sys.exit(1)

    try:
        user = create_admin(sys.argv[1], sys.argv[2], password, role)
        logger.info(f"✅ Created {user.role} {user.email} ({user.id})")
    except (ValueError, SQLAlchemyError) as e:
        logger.error(f"❌ Failed to create user: {e}")
        sys.exit(1)
