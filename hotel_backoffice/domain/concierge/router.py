"""Concierge router - FastAPI endpoints for concierge requests"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import AuthenticatedUser, get_current_user
from ...database import get_db
from ...shared.schemas import MessageResponse
from .schemas import (
    ConciergeAssignRequest,
    ConciergeProgressRequest,
    ConciergeRequestCreate,
    ConciergeRequestResponse,
    ConciergeRequestUpdate,
    ConciergeStatusRequest,
    RequestStatus,
)
from .service import ConciergeService

router = APIRouter(prefix="/concierge", tags=["Concierge"])


def get_concierge_service(db: Session = Depends(get_db)) -> ConciergeService:
    """Dependency injection for ConciergeService"""
    return ConciergeService(db)


@router.get("/requests", response_model=list[ConciergeRequestResponse])
async def get_requests(service: ConciergeService = Depends(get_concierge_service)):
    """Get all concierge requests, newest first"""
    return service.get_requests()


@router.get("/requests/status/{status}", response_model=list[ConciergeRequestResponse])
async def get_requests_by_status(
    status: RequestStatus,
    service: ConciergeService = Depends(get_concierge_service),
):
    return service.get_requests(status=status)


@router.get("/requests/room/{room_number}", response_model=list[ConciergeRequestResponse])
async def get_requests_by_room(
    room_number: str,
    service: ConciergeService = Depends(get_concierge_service),
):
    return service.get_requests(room_number=room_number)


@router.get("/requests/{request_id}", response_model=ConciergeRequestResponse)
async def get_request(request_id: str, service: ConciergeService = Depends(get_concierge_service)):
    return service.get_request(request_id)


@router.post("/requests", response_model=ConciergeRequestResponse, status_code=201)
async def create_request(
    data: ConciergeRequestCreate,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: ConciergeService = Depends(get_concierge_service),
):
    """Log a new concierge request"""
    return service.create_request(data, current_user)


@router.put("/requests/{request_id}", response_model=ConciergeRequestResponse)
async def update_request(
    request_id: str,
    data: ConciergeRequestUpdate,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: ConciergeService = Depends(get_concierge_service),
):
    return service.update_request(request_id, data, current_user)


@router.patch("/requests/{request_id}/assign", response_model=ConciergeRequestResponse)
async def assign_request(
    request_id: str,
    data: ConciergeAssignRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: ConciergeService = Depends(get_concierge_service),
):
    """Assign a request to a staff member"""
    return service.assign_request(request_id, data.assigned_to, current_user)


@router.patch("/requests/{request_id}/status", response_model=ConciergeRequestResponse)
async def update_request_status(
    request_id: str,
    data: ConciergeStatusRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: ConciergeService = Depends(get_concierge_service),
):
    return service.update_status(request_id, data.status, current_user)


@router.patch("/requests/{request_id}/update", response_model=ConciergeRequestResponse)
async def update_request_progress(
    request_id: str,
    data: ConciergeProgressRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: ConciergeService = Depends(get_concierge_service),
):
    """Record progress percentage and notes"""
    return service.update_progress(request_id, data, current_user)


@router.delete("/requests/{request_id}", response_model=MessageResponse)
async def delete_request(
    request_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: ConciergeService = Depends(get_concierge_service),
):
    return service.delete_request(request_id, current_user)
