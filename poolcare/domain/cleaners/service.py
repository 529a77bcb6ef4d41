"""Cleaner service - Business logic for cleaner records"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...auth import hash_password
from ...models import Cleaner
from .repository import CleanerRepository
from .schemas import CleanerCreate, CleanerUpdate

logger = logging.getLogger(__name__)

# Columns that may not be cleared through a partial update
NON_NULLABLE = ("name", "email", "active", "has_vehicle", "available_days", "service_areas")


class CleanerService:
    """Service layer for cleaner business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = CleanerRepository()

    def get_cleaners(self, active: Optional[bool] = None) -> list[Cleaner]:
        return self.repo.get_cleaners(self.db, active=active)

    def get_cleaner(self, cleaner_id: str) -> Cleaner:
        cleaner = self.repo.get_cleaner_by_id(self.db, cleaner_id)
        if not cleaner:
            raise HTTPException(status_code=404, detail="Cleaner not found")
        return cleaner

    def _email_conflict(self) -> HTTPException:
        return HTTPException(status_code=409, detail="Email already registered")

    def create_cleaner(self, data: CleanerCreate) -> Cleaner:
        """Register a cleaner with a sign-in password"""
        logger.info(f"📥 Creating cleaner {data.email}")

        if self.repo.email_in_use(self.db, data.email):
            logger.warning(f"⚠️ Cleaner email already registered: {data.email}")
            raise self._email_conflict()

        cleaner_data = data.model_dump(exclude={"password", "confirm_password"})
        cleaner_data = {k: v for k, v in cleaner_data.items() if v is not None}
        cleaner_data["password_hash"] = hash_password(data.password)

        try:
            cleaner = self.repo.create_cleaner(self.db, **cleaner_data)
        except IntegrityError as e:
            # Lost a race on the unique email index
            self.db.rollback()
            logger.warning(f"⚠️ Integrity error creating cleaner {data.email}: {e.orig}")
            raise self._email_conflict() from e

        logger.info(f"✅ Cleaner created: {cleaner.id}")
        return cleaner

    def update_cleaner(self, cleaner_id: str, data: CleanerUpdate) -> Cleaner:
        cleaner = self.get_cleaner(cleaner_id)

        updates = data.model_dump(exclude_unset=True, exclude={"password", "confirm_password"})
        updates = {k: v for k, v in updates.items() if v is not None or k not in NON_NULLABLE}

        if updates.get("email") and self.repo.email_in_use(self.db, updates["email"], exclude_id=cleaner.id):
            raise self._email_conflict()

        if data.password:
            updates["password_hash"] = hash_password(data.password)

        try:
            cleaner = self.repo.update_cleaner(self.db, cleaner, **updates)
        except IntegrityError as e:
            self.db.rollback()
            raise self._email_conflict() from e

        if updates.get("active") is False:
            logger.info(f"🔒 Cleaner deactivated: {cleaner.id}")
        return cleaner
