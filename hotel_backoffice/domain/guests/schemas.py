"""Guest schemas"""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from ...shared.schemas import CamelModel
from ...shared.validators import validate_email


class GuestCreate(CamelModel):
    first_name: str = Field(..., min_length=1)
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    room_number: Optional[str] = None
    address: Optional[str] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> Optional[str]:
        return validate_email(v)


class GuestResponse(CamelModel):
    id: int
    first_name: str
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    room_number: Optional[str] = None
    address: Optional[str] = None
    created_at: Optional[datetime] = None
