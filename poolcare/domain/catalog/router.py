"""Catalog router - service types and service tasks"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import CurrentUser, get_current_user, require_management
from ...database import get_db
from .schemas import (
    ServiceTaskCreate,
    ServiceTaskResponse,
    ServiceTaskUpdate,
    ServiceTypeCreate,
    ServiceTypeResponse,
    ServiceTypeUpdate,
)
from .service import CatalogService

router = APIRouter(tags=["Catalog"])


def get_catalog_service(db: Session = Depends(get_db)) -> CatalogService:
    """Dependency injection for CatalogService"""
    return CatalogService(db)


# ============================================================================
# SERVICE TYPES
# ============================================================================


@router.get("/service-types", response_model=list[ServiceTypeResponse])
async def get_service_types(
    current_user: CurrentUser = Depends(get_current_user),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.get_service_types()


@router.get("/service-types/{service_type_id}", response_model=ServiceTypeResponse)
async def get_service_type(
    service_type_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.get_service_type(service_type_id)


@router.post("/service-types", response_model=ServiceTypeResponse, status_code=201)
async def create_service_type(
    data: ServiceTypeCreate,
    current_user: CurrentUser = Depends(require_management),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.create_service_type(data)


@router.patch("/service-types/{service_type_id}", response_model=ServiceTypeResponse)
async def update_service_type(
    service_type_id: str,
    data: ServiceTypeUpdate,
    current_user: CurrentUser = Depends(require_management),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.update_service_type(service_type_id, data)


@router.delete("/service-types/{service_type_id}")
async def delete_service_type(
    service_type_id: str,
    confirm: bool = Query(False),
    current_user: CurrentUser = Depends(require_management),
    service: CatalogService = Depends(get_catalog_service),
):
    """Delete a service type not referenced by any appointment (requires confirm=true)"""
    return service.delete_service_type(service_type_id, confirm)


# ============================================================================
# SERVICE TASKS
# ============================================================================


@router.get("/service-tasks", response_model=list[ServiceTaskResponse])
async def get_service_tasks(
    current_user: CurrentUser = Depends(get_current_user),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.get_service_tasks()


@router.get("/service-tasks/{task_id}", response_model=ServiceTaskResponse)
async def get_service_task(
    task_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.get_service_task(task_id)


@router.post("/service-tasks", response_model=ServiceTaskResponse, status_code=201)
async def create_service_task(
    data: ServiceTaskCreate,
    current_user: CurrentUser = Depends(require_management),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.create_service_task(data)


@router.patch("/service-tasks/{task_id}", response_model=ServiceTaskResponse)
async def update_service_task(
    task_id: str,
    data: ServiceTaskUpdate,
    current_user: CurrentUser = Depends(require_management),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.update_service_task(task_id, data)


@router.delete("/service-tasks/{task_id}")
async def delete_service_task(
    task_id: str,
    confirm: bool = Query(False),
    current_user: CurrentUser = Depends(require_management),
    service: CatalogService = Depends(get_catalog_service),
):
    """Delete a task; it is removed from every appointment's task list"""
    return service.delete_service_task(task_id, confirm)


__all__ = ["router"]
