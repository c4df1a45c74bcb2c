from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .database import get_db
from .models import User
from .schemas import CreateUserRequest, UpdateAddressRequest, UpdateUserRequest, UserProfileOut

router = APIRouter(prefix="/api/users", tags=["users"])
logger = logging.getLogger("app.users")

_REQUIRED_FIELDS = ("first_name", "last_name")
_ADDRESS_FIELDS = ("address_line1", "address_line2", "city", "state", "zip_code")


def get_user_or_404(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def _apply_updates(user: User, updates: dict) -> None:
    for key, value in updates.items():
        if key in _REQUIRED_FIELDS and value is None:
            continue
        if key == "is_homeless":
            user.is_homeless = bool(value)
        else:
            setattr(user, key, value)


@router.post("", response_model=UserProfileOut, status_code=201)
def create_user(payload: CreateUserRequest, db: Session = Depends(get_db)):
    if db.query(User).filter(User.email == payload.email).first():
        raise HTTPException(status_code=409, detail="Email is already registered")

    user = User(email=payload.email, first_name=payload.first_name, last_name=payload.last_name)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Email is already registered")
    db.refresh(user)
    logger.info("Created user id=%s", user.id)
    return user


@router.get("/{user_id}", response_model=UserProfileOut)
def get_user(user_id: int, db: Session = Depends(get_db)):
    return get_user_or_404(db, user_id)


@router.put("/{user_id}", response_model=UserProfileOut)
def update_user(user_id: int, payload: UpdateUserRequest, db: Session = Depends(get_db)):
    if not payload.has_any_updates():
        raise HTTPException(status_code=400, detail="No updates provided")

    user = get_user_or_404(db, user_id)
    _apply_updates(user, payload.model_dump(exclude_unset=True))
    db.commit()
    db.refresh(user)
    logger.info("Updated profile for user id=%s", user.id)
    return user


@router.patch("/{user_id}/address", response_model=UserProfileOut)
def update_address(user_id: int, payload: UpdateAddressRequest, db: Session = Depends(get_db)):
    updates = payload.model_dump(exclude_unset=True)
    if not updates:
        raise HTTPException(status_code=400, detail="No updates provided")

    user = get_user_or_404(db, user_id)
    if payload.is_homeless and payload.is_clearing_address():
        # Marking a user homeless without an address wipes the stored one.
        for key in _ADDRESS_FIELDS:
            updates[key] = None
    _apply_updates(user, updates)
    db.commit()
    db.refresh(user)
    return user
