"""
Task API routes.
Organizers manage tasks per event; assignees move their status.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status

from eventplanning.api.dependencies import get_current_principal
from eventplanning.core.policy import Principal
from eventplanning.schemas.task import TaskCreate, TaskResponse, TaskStatusUpdate, TaskUpdate
from eventplanning.services.task_service import task_service

router = APIRouter(prefix="/tasks", tags=["Tasks"])


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(task_data: TaskCreate, principal: Principal = Depends(get_current_principal)):
    return await task_service.create_task(task_data, principal)


@router.get("/mine", response_model=List[TaskResponse])
async def list_my_tasks(principal: Principal = Depends(get_current_principal)):
    """Tasks assigned to the caller."""
    return await task_service.list_mine(principal)


@router.get("/all", response_model=List[TaskResponse])
async def list_all_tasks(principal: Principal = Depends(get_current_principal)):
    return await task_service.list_all(principal)


@router.get("/search", response_model=List[TaskResponse])
async def search_tasks(
    q: Optional[str] = Query(None, description="Fragment of title or description"),
    principal: Principal = Depends(get_current_principal)
):
    return await task_service.search(q, principal)


@router.get("/event/{event_id}", response_model=List[TaskResponse])
async def list_event_tasks(event_id: int = Path(..., ge=1), principal: Principal = Depends(get_current_principal)):
    return await task_service.list_for_event(event_id, principal)


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_data: TaskUpdate,
    task_id: int = Path(..., ge=1),
    principal: Principal = Depends(get_current_principal)
):
    return await task_service.update_task(task_id, task_data, principal)


@router.patch("/{task_id}/status", response_model=TaskResponse)
async def update_task_status(
    status_data: TaskStatusUpdate,
    task_id: int = Path(..., ge=1),
    principal: Principal = Depends(get_current_principal)
):
    return await task_service.update_status(task_id, status_data, principal)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(task_id: int = Path(..., ge=1), principal: Principal = Depends(get_current_principal)):
    await task_service.delete_task(task_id, principal)
