"""Cleaner repository - Database operations for cleaners"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Cleaner, DashboardUser


class CleanerRepository:
    """Repository for cleaner database operations"""

    @staticmethod
    def get_cleaners(db: Session, active: Optional[bool] = None) -> list[Cleaner]:
        query = db.query(Cleaner)
        if active is not None:
            query = query.filter(Cleaner.active == active)
        return query.order_by(Cleaner.name.asc()).all()

    @staticmethod
    def get_cleaner_by_id(db: Session, cleaner_id: str) -> Optional[Cleaner]:
        return db.query(Cleaner).filter(Cleaner.id == cleaner_id).first()

    @staticmethod
    def email_in_use(db: Session, email: str, exclude_id: Optional[str] = None) -> bool:
        """Emails are unique across cleaners and dashboard users (both can sign in)"""
        query = db.query(Cleaner.id).filter(Cleaner.email == email)
        if exclude_id:
            query = query.filter(Cleaner.id != exclude_id)
        if query.first():
            return True
        return db.query(DashboardUser.id).filter(DashboardUser.email == email).first() is not None

    @staticmethod
    def create_cleaner(db: Session, **cleaner_data) -> Cleaner:
        cleaner = Cleaner(**cleaner_data)
        db.add(cleaner)
        db.commit()
        db.refresh(cleaner)
        return cleaner

    @staticmethod
    def update_cleaner(db: Session, cleaner: Cleaner, **updates) -> Cleaner:
        for key, value in updates.items():
            if hasattr(cleaner, key):
                setattr(cleaner, key, value)

        db.commit()
        db.refresh(cleaner)
        return cleaner
