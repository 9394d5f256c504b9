"""Guest router - minimal directory used by the spa booking screens"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ...auth import AuthenticatedUser, get_current_user
from ...database import get_db
from ...models import Guest
from .schemas import GuestCreate, GuestResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/guests", tags=["Guests"])


@router.get("", response_model=list[GuestResponse])
async def get_guests(db: Session = Depends(get_db)):
    return db.query(Guest).order_by(Guest.last_name, Guest.first_name, Guest.id).all()


@router.get("/{guest_id}", response_model=GuestResponse)
async def get_guest(guest_id: int, db: Session = Depends(get_db)):
    guest = db.query(Guest).filter(Guest.id == guest_id).first()
    if not guest:
        raise HTTPException(status_code=404, detail="Guest not found")
    return guest


@router.post("", response_model=GuestResponse, status_code=201)
async def create_guest(
    data: GuestCreate,
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    guest = Guest(**data.model_dump())
    db.add(guest)
    db.commit()
    db.refresh(guest)
    logger.info(f"Guest {guest.id} registered by {current_user.id}")
    return guest
