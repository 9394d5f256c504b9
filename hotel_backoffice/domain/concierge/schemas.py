"""Concierge domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional, Union

from pydantic import Field, field_validator

from ...shared.schemas import CamelModel

RequestType = Literal[
    "laundry",
    "room-service",
    "luggage",
    "maintenance",
    "housekeeping",
    "transportation",
    "information",
    "other",
]
RequestPriority = Literal["low", "medium", "high", "urgent"]
RequestStatus = Literal["pending", "assigned", "in-progress", "completed", "cancelled"]


class ConciergeRequestCreate(CamelModel):
    """Schema for logging a concierge request; id is assigned when omitted"""

    id: Optional[str] = None
    guest_name: str = Field(..., min_length=1)
    guest_id: Union[str, int]
    room_number: Union[str, int]
    request_type: RequestType
    description: Optional[str] = None
    priority: RequestPriority = "medium"
    status: RequestStatus = "pending"
    request_date: Optional[datetime] = None
    required_by_date: Optional[datetime] = None
    assigned_to: Optional[str] = None
    notes: str = ""
    staff_notes: str = ""
    progress_percentage: int = Field(0, ge=0, le=100)

    @field_validator("guest_id", "room_number")
    @classmethod
    def as_text(cls, v) -> str:
        return str(v)


class ConciergeRequestUpdate(CamelModel):
    """Schema for editing a concierge request"""

    guest_name: Optional[str] = Field(None, min_length=1)
    guest_id: Optional[Union[str, int]] = None
    room_number: Optional[Union[str, int]] = None
    request_type: Optional[RequestType] = None
    description: Optional[str] = None
    priority: Optional[RequestPriority] = None
    status: Optional[RequestStatus] = None
    required_by_date: Optional[datetime] = None
    assigned_to: Optional[str] = None
    notes: Optional[str] = None
    staff_notes: Optional[str] = None
    progress_percentage: Optional[int] = Field(None, ge=0, le=100)

    @field_validator("guest_id", "room_number")
    @classmethod
    def as_text(cls, v) -> Optional[str]:
        return str(v) if v is not None else v


class ConciergeAssignRequest(CamelModel):
    assigned_to: str = Field(..., min_length=1)


class ConciergeStatusRequest(CamelModel):
    status: RequestStatus


class ConciergeProgressRequest(CamelModel):
    progress_percentage: Optional[int] = Field(None, ge=0, le=100)
    notes: Optional[str] = None


class ConciergeRequestResponse(CamelModel):
    id: str
    guest_name: str
    guest_id: str
    room_number: str
    request_type: str
    description: Optional[str] = None
    priority: str
    status: str
    request_date: Optional[datetime] = None
    required_by_date: Optional[datetime] = None
    assigned_to: Optional[str] = None
    assigned_date: Optional[datetime] = None
    completed_date: Optional[datetime] = None
    notes: Optional[str] = None
    staff_notes: Optional[str] = None
    progress_percentage: int
    last_updated: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
