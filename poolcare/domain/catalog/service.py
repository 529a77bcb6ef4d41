"""Catalog service - Business logic for service types and tasks"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import ServiceTask, ServiceType
from ...shared.deletion import require_confirmation
from .repository import CatalogRepository
from .schemas import ServiceTaskCreate, ServiceTaskUpdate, ServiceTypeCreate, ServiceTypeUpdate

logger = logging.getLogger(__name__)


class CatalogService:
    """Service layer for the service catalogue"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = CatalogRepository()

    # Service types
    def get_service_types(self) -> list[ServiceType]:
        return self.repo.list_items(self.db, ServiceType)

    def get_service_type(self, service_type_id: str) -> ServiceType:
        service_type = self.repo.get_item(self.db, ServiceType, service_type_id)
        if not service_type:
            raise HTTPException(status_code=404, detail="Service type not found")
        return service_type

    def create_service_type(self, data: ServiceTypeCreate) -> ServiceType:
        service_type = self.repo.create_item(self.db, ServiceType, **data.model_dump())
        logger.info(f"✅ Service type created: {service_type.name}")
        return service_type

    def update_service_type(self, service_type_id: str, data: ServiceTypeUpdate) -> ServiceType:
        service_type = self.get_service_type(service_type_id)
        return self.repo.update_item(self.db, service_type, **data.model_dump(exclude_unset=True))

    def delete_service_type(self, service_type_id: str, confirm: bool) -> dict:
        service_type = self.get_service_type(service_type_id)
        require_confirmation(confirm, "service type")

        if self.repo.count_type_usage(self.db, service_type.id):
            raise HTTPException(
                status_code=409,
                detail="Service type is used by appointments and cannot be deleted",
            )

        self.repo.delete_type(self.db, service_type)
        logger.info(f"🗑️ Service type deleted: {service_type_id}")
        return {"message": "Service type deleted"}

    # Service tasks
    def get_service_tasks(self) -> list[ServiceTask]:
        return self.repo.list_items(self.db, ServiceTask)

    def get_service_task(self, task_id: str) -> ServiceTask:
        task = self.repo.get_item(self.db, ServiceTask, task_id)
        if not task:
            raise HTTPException(status_code=404, detail="Service task not found")
        return task

    def create_service_task(self, data: ServiceTaskCreate) -> ServiceTask:
        task = self.repo.create_item(self.db, ServiceTask, **data.model_dump())
        logger.info(f"✅ Service task created: {task.name}")
        return task

    def update_service_task(self, task_id: str, data: ServiceTaskUpdate) -> ServiceTask:
        task = self.get_service_task(task_id)
        return self.repo.update_item(self.db, task, **data.model_dump(exclude_unset=True))

    def delete_service_task(self, task_id: str, confirm: bool) -> dict:
        task = self.get_service_task(task_id)
        require_confirmation(confirm, "service task")

        unlinked = self.repo.delete_task(self.db, task)
        logger.info(f"🗑️ Service task deleted: {task_id} (removed from {unlinked} appointment(s))")
        return {"message": "Service task deleted"}
