"""Catalog repository - service types and service tasks share the same CRUD shape"""

from typing import Optional, Union

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Appointment, ServiceTask, ServiceType, appointment_service_tasks

CatalogItem = Union[ServiceType, ServiceTask]


class CatalogRepository:
    """Repository for catalogue database operations"""

    @staticmethod
    def list_items(db: Session, model) -> list[CatalogItem]:
        return db.query(model).order_by(model.name.asc()).all()

    @staticmethod
    def get_item(db: Session, model, item_id: str) -> Optional[CatalogItem]:
        return db.query(model).filter(model.id == item_id).first()

    @staticmethod
    def get_tasks_by_ids(db: Session, task_ids: list[str]) -> list[ServiceTask]:
        if not task_ids:
            return []
        return db.query(ServiceTask).filter(ServiceTask.id.in_(task_ids)).all()

    @staticmethod
    def create_item(db: Session, model, **data) -> CatalogItem:
        item = model(**data)
        db.add(item)
        db.commit()
        db.refresh(item)
        return item

    @staticmethod
    def update_item(db: Session, item: CatalogItem, **updates) -> CatalogItem:
        for key, value in updates.items():
            if value is not None and hasattr(item, key):
                setattr(item, key, value)

        db.commit()
        db.refresh(item)
        return item

    @staticmethod
    def count_type_usage(db: Session, service_type_id: str) -> int:
        return (
            db.query(func.count(Appointment.id))
            .filter(Appointment.service_type_id == service_type_id)
            .scalar()
        )

    @staticmethod
    def delete_type(db: Session, service_type: ServiceType) -> None:
        db.delete(service_type)
        db.commit()

    @staticmethod
    def delete_task(db: Session, task: ServiceTask) -> int:
        """Delete a task and unlink it from appointments. Returns the unlinked count."""
        result = db.execute(
            appointment_service_tasks.delete().where(appointment_service_tasks.c.service_task_id == task.id)
        )
        db.delete(task)
        db.commit()
        return result.rowcount or 0
