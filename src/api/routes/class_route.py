"""Class management routes."""

from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, status

from api.routes.auth import get_current_user
from core.dependencies import ClassManagerDep
from schemas.class_schema import (
    ClassInfo,
    CreateClassRequest,
    DeactivateClassResponse,
    UpdateClassRequest,
)
from schemas.user import User
from utils.class_manager import refresh_class_counters

router = APIRouter(prefix="/api/classes", tags=["Class"])


@router.post(
    "",
    response_model=ClassInfo,
    status_code=status.HTTP_201_CREATED,
    summary="Create a class",
)
def create_class(
    req: CreateClassRequest,
    class_manager: ClassManagerDep,
    current_user: User = Depends(get_current_user),
) -> ClassInfo:
    return class_manager.create_class(
        current_user, req.name, req.description, req.subject
    )


@router.get("", response_model=List[ClassInfo], summary="List active classes")
def list_classes(
    class_manager: ClassManagerDep,
    search: Optional[str] = None,
    current_user: User = Depends(get_current_user),
) -> List[ClassInfo]:
    return class_manager.list_classes(current_user, search=search)


@router.get(
    "/my-classes",
    response_model=List[ClassInfo],
    summary="List the current teacher's classes",
)
def list_my_classes(
    class_manager: ClassManagerDep,
    current_user: User = Depends(get_current_user),
) -> List[ClassInfo]:
    return class_manager.list_my_classes(current_user)


@router.get("/{class_id}", response_model=ClassInfo, summary="Get a class")
def get_class(
    class_id: str,
    background_tasks: BackgroundTasks,
    class_manager: ClassManagerDep,
    current_user: User = Depends(get_current_user),
) -> ClassInfo:
    """Get an active class with freshly counted questions.

    The recomputed counters are written back to the class after the
    response is sent; a failure there never reaches the client.
    """
    class_info = class_manager.get_class(current_user, class_id)
    background_tasks.add_task(
        refresh_class_counters,
        class_info.id,
        class_info.total_questions,
        class_info.active_questions,
    )
    return class_info


@router.put("/{class_id}", response_model=ClassInfo, summary="Update a class")
def update_class(
    class_id: str,
    req: UpdateClassRequest,
    class_manager: ClassManagerDep,
    current_user: User = Depends(get_current_user),
) -> ClassInfo:
    """Update name, description or subject. Only the creating teacher may."""
    return class_manager.update_class(
        current_user, class_id, req.model_dump(exclude_unset=True)
    )


@router.delete(
    "/{class_id}",
    response_model=DeactivateClassResponse,
    summary="Deactivate a class",
)
def deactivate_class(
    class_id: str,
    class_manager: ClassManagerDep,
    current_user: User = Depends(get_current_user),
) -> DeactivateClassResponse:
    class_info = class_manager.deactivate_class(current_user, class_id)
    return DeactivateClassResponse(
        message="Class deactivated successfully", class_info=class_info
    )
