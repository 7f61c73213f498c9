"""
Workout endpoints for API v1.

Fixed paths (``/calendar``, ``/templates/list``) are declared before
``/{workout_id}`` so they are not captured as ids.
"""

from datetime import date
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, Request, status

from ....core.security import Principal
from ....schemas.common import DataResponse, ListResponse
from ....schemas.workout import Workout, WorkoutCreate, WorkoutType, WorkoutUpdate
from ....services.workout_service import WorkoutService
from ...deps import coach_access, get_workout_service

router = APIRouter()


@router.get("", response_model=ListResponse[Workout])
async def list_workouts(
    request: Request,
    on_date: Optional[date] = Query(None, alias="date"),
    client_id: Optional[str] = Query(None, alias="clientId"),
    workout_type: Optional[WorkoutType] = Query(None, alias="type"),
    status_filter: Optional[str] = Query(
        None, alias="status", pattern="^(scheduled|completed|cancelled|missed|all)$"
    ),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=100),
    current_user: Principal = Depends(coach_access),
    workouts: WorkoutService = Depends(get_workout_service),
) -> ListResponse[Workout]:
    """List the coach's workouts ordered by date and time.

    Cancelled workouts are hidden unless ``status=cancelled`` or
    ``status=all`` is given.
    """
    result = await workouts.list_workouts(
        current_user.user_id,
        on_date=on_date,
        client_id=client_id,
        workout_type=workout_type,
        status=status_filter,
        page=page,
        limit=limit or request.app.state.settings.default_page_size,
    )
    return ListResponse[Workout](data=result.items, pagination=result.pagination())


@router.get("/calendar")
async def workout_calendar(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=2020, le=2030),
    current_user: Principal = Depends(coach_access),
    workouts: WorkoutService = Depends(get_workout_service),
) -> Dict[str, Any]:
    """Workouts of one month grouped by date; defaults to the current month."""
    today = workouts.clock().date()
    data = await workouts.calendar(current_user.user_id, month or today.month, year or today.year)
    return {"success": True, "data": data}


@router.get("/templates/list")
async def workout_templates(
    current_user: Principal = Depends(coach_access),
    workouts: WorkoutService = Depends(get_workout_service),
) -> Dict[str, Any]:
    return {"success": True, "data": await workouts.list_templates()}


@router.post("", response_model=DataResponse[Workout], status_code=status.HTTP_201_CREATED)
async def create_workout(
    workout: WorkoutCreate,
    current_user: Principal = Depends(coach_access),
    workouts: WorkoutService = Depends(get_workout_service),
) -> DataResponse[Workout]:
    """Schedule a workout.  Returns 409 if the slot is already taken."""
    created = await workouts.create_workout(current_user.user_id, workout)
    return DataResponse[Workout](data=created, message="Workout created successfully")


@router.get("/{workout_id}", response_model=DataResponse[Workout])
async def get_workout(
    workout_id: str,
    current_user: Principal = Depends(coach_access),
    workouts: WorkoutService = Depends(get_workout_service),
) -> DataResponse[Workout]:
    return DataResponse[Workout](data=await workouts.get_workout(current_user.user_id, workout_id))


@router.put("/{workout_id}", response_model=DataResponse[Workout])
async def update_workout(
    workout_id: str,
    updates: WorkoutUpdate,
    current_user: Principal = Depends(coach_access),
    workouts: WorkoutService = Depends(get_workout_service),
) -> DataResponse[Workout]:
    """Partially update a workout.

    Setting ``status`` to ``completed`` stamps ``completedAt``; moving
    the workout re-checks its slot.
    """
    changes = {k: v for k, v in updates.model_dump(exclude_unset=True).items() if v is not None}
    updated = await workouts.update_workout(current_user.user_id, workout_id, changes)
    return DataResponse[Workout](data=updated, message="Workout updated successfully")


@router.delete("/{workout_id}", response_model=DataResponse[Workout])
async def delete_workout(
    workout_id: str,
    current_user: Principal = Depends(coach_access),
    workouts: WorkoutService = Depends(get_workout_service),
) -> DataResponse[Workout]:
    """Cancel a workout, freeing its slot."""
    workout = await workouts.cancel_workout(current_user.user_id, workout_id)
    return DataResponse[Workout](data=workout, message="Workout cancelled successfully")
