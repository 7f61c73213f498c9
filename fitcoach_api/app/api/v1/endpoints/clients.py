"""
Client endpoints for API v1.

Every route is scoped to the authenticated coach: clients of another
coach answer 404 exactly like clients that do not exist.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, Request, status

from ....core.security import Principal
from ....schemas.client import Client, ClientCreate, ClientUpdate
from ....schemas.coach import Period
from ....schemas.common import DataResponse, ListResponse
from ....services.client_service import ClientService
from ...deps import coach_access, get_client_service

router = APIRouter()


@router.get("", response_model=ListResponse[Client])
async def list_clients(
    request: Request,
    status_filter: Optional[str] = Query(None, alias="status", pattern="^(active|inactive|all)$"),
    search: Optional[str] = Query(None, min_length=1),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=100),
    current_user: Principal = Depends(coach_access),
    clients: ClientService = Depends(get_client_service),
) -> ListResponse[Client]:
    """List the coach's clients.

    - **status**: `active`, `inactive` or `all`; by default deactivated
      clients are hidden.
    - **search**: case-insensitive match on name, email or goals.
    - **page**, **limit**: pagination (limit 1..100).
    """
    result = await clients.list_clients(
        current_user.user_id,
        status=status_filter,
        search=search,
        page=page,
        limit=limit or request.app.state.settings.default_page_size,
    )
    return ListResponse[Client](data=result.items, pagination=result.pagination())


@router.post("", response_model=DataResponse[Client], status_code=status.HTTP_201_CREATED)
async def create_client(
    client: ClientCreate,
    current_user: Principal = Depends(coach_access),
    clients: ClientService = Depends(get_client_service),
) -> DataResponse[Client]:
    """Add a client.  Returns 409 if any client already uses the email."""
    created = await clients.create_client(current_user.user_id, client)
    return DataResponse[Client](data=created, message="Client created successfully")


@router.get("/{client_id}", response_model=DataResponse[Client])
async def get_client(
    client_id: str,
    current_user: Principal = Depends(coach_access),
    clients: ClientService = Depends(get_client_service),
) -> DataResponse[Client]:
    return DataResponse[Client](data=await clients.get_client(current_user.user_id, client_id))


@router.put("/{client_id}", response_model=DataResponse[Client])
async def update_client(
    client_id: str,
    updates: ClientUpdate,
    current_user: Principal = Depends(coach_access),
    clients: ClientService = Depends(get_client_service),
) -> DataResponse[Client]:
    """Partially update a client; omitted fields are left unchanged."""
    changes = {k: v for k, v in updates.model_dump(exclude_unset=True).items() if v is not None}
    updated = await clients.update_client(current_user.user_id, client_id, changes)
    return DataResponse[Client](data=updated, message="Client updated successfully")


@router.delete("/{client_id}", response_model=DataResponse[Client])
async def delete_client(
    client_id: str,
    current_user: Principal = Depends(coach_access),
    clients: ClientService = Depends(get_client_service),
) -> DataResponse[Client]:
    """Deactivate a client.  The record stays readable by id."""
    client = await clients.deactivate_client(current_user.user_id, client_id)
    return DataResponse[Client](data=client, message="Client deactivated successfully")


@router.get("/{client_id}/progress")
async def client_progress(
    client_id: str,
    period: Period = Query(Period.MONTH),
    current_user: Principal = Depends(coach_access),
    clients: ClientService = Depends(get_client_service),
) -> Dict[str, Any]:
    progress = await clients.get_progress(current_user.user_id, client_id, period)
    return {"success": True, "period": period.value, "data": progress}
