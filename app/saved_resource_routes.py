from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from Security.feature_xss_sanitization import sanitize_for_context
from Security.xss_patterns import find_threats

from .database import get_db
from .models import SavedResource
from .schemas import (
    SanitizePreviewRequest,
    SanitizePreviewResponse,
    SavedResourceOut,
    SaveResourceRequest,
    UpdateSavedResourceNotesRequest,
)
from .user_routes import get_user_or_404

router = APIRouter(prefix="/api", tags=["saved-resources"])
logger = logging.getLogger("app.saved_resources")


def _get_saved_or_404(db: Session, saved_id: int) -> SavedResource:
    saved = db.query(SavedResource).filter(SavedResource.id == saved_id).first()
    if not saved:
        raise HTTPException(status_code=404, detail="Saved resource not found")
    return saved


@router.post("/users/{user_id}/saved", response_model=SavedResourceOut, status_code=201)
def save_resource(user_id: int, payload: SaveResourceRequest, db: Session = Depends(get_db)):
    get_user_or_404(db, user_id)
    resource_id = str(payload.resource_id)

    existing = (
        db.query(SavedResource)
        .filter(SavedResource.user_id == user_id, SavedResource.resource_id == resource_id)
        .first()
    )
    if existing:
        raise HTTPException(status_code=409, detail="Resource is already saved")

    saved = SavedResource(user_id=user_id, resource_id=resource_id, notes=payload.notes)
    db.add(saved)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Resource is already saved")
    db.refresh(saved)
    logger.info("User id=%s saved resource %s", user_id, resource_id)
    return saved


@router.get("/users/{user_id}/saved", response_model=list[SavedResourceOut])
def list_saved_resources(user_id: int, db: Session = Depends(get_db)):
    get_user_or_404(db, user_id)
    return (
        db.query(SavedResource)
        .filter(SavedResource.user_id == user_id)
        .order_by(SavedResource.created_at.desc(), SavedResource.id.desc())
        .all()
    )


@router.get("/saved/{saved_id}", response_model=SavedResourceOut)
def get_saved_resource(saved_id: int, db: Session = Depends(get_db)):
    return _get_saved_or_404(db, saved_id)


@router.patch("/saved/{saved_id}/notes", response_model=SavedResourceOut)
def update_saved_notes(saved_id: int, payload: UpdateSavedResourceNotesRequest, db: Session = Depends(get_db)):
    saved = _get_saved_or_404(db, saved_id)
    saved.notes = None if payload.is_clearing_notes() else payload.notes
    db.commit()
    db.refresh(saved)
    return saved


@router.delete("/saved/{saved_id}", status_code=204)
def delete_saved_resource(saved_id: int, db: Session = Depends(get_db)):
    saved = _get_saved_or_404(db, saved_id)
    db.delete(saved)
    db.commit()
    return Response(status_code=204)


@router.post("/sanitize/preview", response_model=SanitizePreviewResponse)
def sanitize_preview(payload: SanitizePreviewRequest):
    sanitized = sanitize_for_context(payload.text, payload.context)
    modified = sanitized != payload.text
    return SanitizePreviewResponse(
        context=payload.context,
        sanitized=sanitized,
        modified=modified,
        threats=find_threats(payload.text) if modified else [],
    )
