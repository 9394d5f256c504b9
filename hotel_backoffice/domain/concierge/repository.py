"""Concierge repository - Database operations for concierge requests"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models_concierge import ConciergeRequest


class ConciergeRepository:
    """Repository for concierge request database operations"""

    @staticmethod
    def get_requests(
        db: Session, status: Optional[str] = None, room_number: Optional[str] = None
    ) -> list[ConciergeRequest]:
        """Get requests, newest first, optionally filtered by status or room"""
        query = db.query(ConciergeRequest)

        if status:
            query = query.filter(ConciergeRequest.status == status)

        if room_number:
            query = query.filter(ConciergeRequest.room_number == room_number)

        return query.order_by(ConciergeRequest.created_at.desc(), ConciergeRequest.id.desc()).all()

    @staticmethod
    def get_request_by_id(db: Session, request_id: str) -> Optional[ConciergeRequest]:
        return db.query(ConciergeRequest).filter(ConciergeRequest.id == request_id).first()

    @staticmethod
    def get_request_codes(db: Session, prefix: str) -> list[str]:
        """Ids starting with ``prefix``, used to derive the next request code"""
        rows = db.query(ConciergeRequest.id).filter(ConciergeRequest.id.like(f"{prefix}%")).all()
        return [row.id for row in rows]

    @staticmethod
    def create_request(db: Session, **request_data) -> ConciergeRequest:
        request = ConciergeRequest(**request_data)
        db.add(request)
        db.commit()
        db.refresh(request)
        return request

    @staticmethod
    def update_request(db: Session, request: ConciergeRequest, **updates) -> ConciergeRequest:
        """Write the supplied fields onto a request"""
        for key, value in updates.items():
            if hasattr(request, key):
                setattr(request, key, value)

        db.commit()
        db.refresh(request)
        return request

    @staticmethod
    def delete_request(db: Session, request: ConciergeRequest) -> None:
        db.delete(request)
        db.commit()
