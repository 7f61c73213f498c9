"""
Coach profile, schedule and dashboard endpoints.

All routes operate on the profile of the authenticated account.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Query

from ....core.security import Principal
from ....schemas.coach import Coach, CoachProfileUpdate, Period, ScheduleUpdate
from ....schemas.common import DataResponse
from ....services.coach_service import CoachService
from ...deps import coach_access, get_coach_service

router = APIRouter()


@router.get("/profile", response_model=DataResponse[Coach])
async def get_profile(
    current_user: Principal = Depends(coach_access),
    coaches: CoachService = Depends(get_coach_service),
) -> DataResponse[Coach]:
    return DataResponse[Coach](data=await coaches.get_profile(current_user.user_id))


@router.put("/profile", response_model=DataResponse[Coach])
async def update_profile(
    updates: CoachProfileUpdate,
    current_user: Principal = Depends(coach_access),
    coaches: CoachService = Depends(get_coach_service),
) -> DataResponse[Coach]:
    """Update profile fields; omitted fields keep their values."""
    changes = {k: v for k, v in updates.model_dump(exclude_unset=True).items() if v is not None}
    coach = await coaches.update_profile(current_user.user_id, changes)
    return DataResponse[Coach](data=coach, message="Profile updated successfully")


@router.get("/schedule")
async def get_schedule(
    current_user: Principal = Depends(coach_access),
    coaches: CoachService = Depends(get_coach_service),
) -> Dict[str, Any]:
    coach = await coaches.get_profile(current_user.user_id)
    return {"success": True, "data": coach.schedule}


@router.put("/schedule")
async def update_schedule(
    body: ScheduleUpdate,
    current_user: Principal = Depends(coach_access),
    coaches: CoachService = Depends(get_coach_service),
) -> Dict[str, Any]:
    """Replace the weekly schedule.

    Days are ``monday`` to ``sunday``; each needs ``start``, ``end``
    and ``available``.  Days left out are removed from the schedule.
    """
    coach = await coaches.update_schedule(current_user.user_id, body.schedule)
    return {"success": True, "message": "Schedule updated successfully", "data": coach.schedule}


@router.get("/dashboard")
async def dashboard(
    current_user: Principal = Depends(coach_access),
    coaches: CoachService = Depends(get_coach_service),
) -> Dict[str, Any]:
    return {"success": True, "data": await coaches.dashboard(current_user.user_id)}


@router.get("/stats")
async def stats(
    period: Period = Query(Period.MONTH),
    current_user: Principal = Depends(coach_access),
    coaches: CoachService = Depends(get_coach_service),
) -> Dict[str, Any]:
    return {"success": True, "period": period.value, "data": await coaches.stats(current_user.user_id, period)}


@router.get("/clients-overview")
async def clients_overview(
    current_user: Principal = Depends(coach_access),
    coaches: CoachService = Depends(get_coach_service),
) -> Dict[str, Any]:
    return {"success": True, "data": await coaches.clients_overview(current_user.user_id)}
