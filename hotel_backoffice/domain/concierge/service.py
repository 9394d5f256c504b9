"""Concierge service - Business logic for concierge requests"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...auth import AuthenticatedUser
from ...models import utcnow
from ...models_concierge import ConciergeRequest
from ...shared.identifiers import next_sequential_code
from .repository import ConciergeRepository
from .schemas import ConciergeProgressRequest, ConciergeRequestCreate, ConciergeRequestUpdate

logger = logging.getLogger(__name__)

REQUEST_CODE_PREFIX = "CR"


class ConciergeService:
    """Service layer for concierge request handling"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ConciergeRepository()

    def get_requests(
        self, status: Optional[str] = None, room_number: Optional[str] = None
    ) -> list[ConciergeRequest]:
        return self.repo.get_requests(self.db, status=status, room_number=room_number)

    def get_request(self, request_id: str) -> ConciergeRequest:
        request = self.repo.get_request_by_id(self.db, request_id)
        if not request:
            raise HTTPException(status_code=404, detail="Request not found")
        return request

    def create_request(self, data: ConciergeRequestCreate, user: AuthenticatedUser) -> ConciergeRequest:
        """Log a request, assigning the next CR#### code when none was given"""
        values = data.model_dump()
        if not values.get("id"):
            codes = self.repo.get_request_codes(self.db, REQUEST_CODE_PREFIX)
            values["id"] = next_sequential_code(REQUEST_CODE_PREFIX, codes)
        elif self.repo.get_request_by_id(self.db, values["id"]):
            raise HTTPException(status_code=400, detail=f"Request {values['id']} already exists")

        values["request_date"] = values.get("request_date") or utcnow()
        request = self.repo.create_request(self.db, **values)
        logger.info(f"🛎️ Concierge request {request.id} ({request.request_type}) logged by {user.id}")
        return request

    def update_request(
        self, request_id: str, data: ConciergeRequestUpdate, user: AuthenticatedUser
    ) -> ConciergeRequest:
        request = self.get_request(request_id)
        return self.repo.update_request(self.db, request, **data.model_dump(exclude_unset=True))

    def assign_request(self, request_id: str, assigned_to: str, user: AuthenticatedUser) -> ConciergeRequest:
        """Hand a request to a staff member; status moves to assigned"""
        request = self.get_request(request_id)
        request = self.repo.update_request(
            self.db, request, assigned_to=assigned_to, assigned_date=utcnow(), status="assigned"
        )
        logger.info(f"Concierge request {request_id} assigned to {assigned_to}")
        return request

    def update_status(self, request_id: str, status: str, user: AuthenticatedUser) -> ConciergeRequest:
        request = self.get_request(request_id)
        updates = {"status": status}
        if status == "completed":
            updates["completed_date"] = utcnow()
        return self.repo.update_request(self.db, request, **updates)

    def update_progress(
        self, request_id: str, data: ConciergeProgressRequest, user: AuthenticatedUser
    ) -> ConciergeRequest:
        """Record progress and notes from the handling staff member"""
        request = self.get_request(request_id)
        updates = {"last_updated": utcnow()}
        if data.progress_percentage is not None:
            updates["progress_percentage"] = data.progress_percentage
        if data.notes is not None:
            updates["notes"] = data.notes
        return self.repo.update_request(self.db, request, **updates)

    def delete_request(self, request_id: str, user: AuthenticatedUser) -> dict:
        request = self.get_request(request_id)
        self.repo.delete_request(self.db, request)
        logger.info(f"🗑️ Concierge request {request_id} deleted by {user.id}")
        return {"message": "Request deleted"}
