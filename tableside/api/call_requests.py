"""Call request API endpoints"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tableside.database import get_db
from tableside.models.call_request import CallRequestStatus
from tableside.models.user import User, UserRole
from tableside.schemas.call_request import (
    CallRequestCreate,
    CallRequestResponse,
    CallRequestListResponse,
)
from tableside.services.call_requests import CallRequestService
from tableside.services.notifier import ConnectionManager, get_notifier
from tableside.api.auth import require_role

router = APIRouter()

any_staff = require_role(UserRole.WAITER, UserRole.CHEF)
floor_staff = require_role(UserRole.WAITER)


def get_call_service(
    db: AsyncSession = Depends(get_db),
    notifier: ConnectionManager = Depends(get_notifier),
) -> CallRequestService:
    return CallRequestService(db, notifier=notifier)


@router.post("", response_model=CallRequestResponse, status_code=201)
async def create_call_request(
    request_data: CallRequestCreate,
    calls: CallRequestService = Depends(get_call_service),
):
    """Ask staff to come to the table"""
    return await calls.create_call_request(request_data)


@router.get("", response_model=CallRequestListResponse)
async def list_call_requests(
    status: Optional[CallRequestStatus] = None,
    table_id: Optional[UUID] = None,
    current_user: User = Depends(any_staff),
    calls: CallRequestService = Depends(get_call_service),
):
    """List call requests, oldest first"""
    items = await calls.list_call_requests(status=status, table_id=table_id)
    return CallRequestListResponse(items=items, total=len(items))


@router.post("/{request_id}/claim", response_model=CallRequestResponse)
async def claim_call_request(
    request_id: UUID,
    current_user: User = Depends(floor_staff),
    calls: CallRequestService = Depends(get_call_service),
):
    return await calls.claim(request_id, current_user.id)


@router.post("/{request_id}/release", response_model=CallRequestResponse)
async def release_call_request(
    request_id: UUID,
    current_user: User = Depends(floor_staff),
    calls: CallRequestService = Depends(get_call_service),
):
    return await calls.release(request_id)


@router.put("/{request_id}/complete", response_model=CallRequestResponse)
async def complete_call_request(
    request_id: UUID,
    current_user: User = Depends(floor_staff),
    calls: CallRequestService = Depends(get_call_service),
):
    """Mark the request handled by the current staff member"""
    return await calls.complete_call_request(request_id, current_user.id)
