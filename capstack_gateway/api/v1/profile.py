"""GET/PUT /v1/profile - Stored financial profile"""

import logging
from dataclasses import asdict
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from capstack_gateway.api.v1.schemas import ProfileResponse, ProfileSchema
from capstack_gateway.api.dependencies import get_current_user_id, get_request_id
from capstack_gateway.infrastructure.database.session import get_db
from capstack_gateway.infrastructure.database.repositories import ProfileRepository
from capstack_gateway.domain.profiles import resolve_profile

router = APIRouter()


@router.get("/profile", response_model=ProfileResponse)
def get_profile(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """Return the stored profile, or the default profile with source="default" """
    profile, used_default = resolve_profile(ProfileRepository(db), user_id)
    return ProfileResponse(
        profile=ProfileSchema(**asdict(profile)),
        source="default" if used_default else "stored",
    )


@router.put("/profile", response_model=ProfileResponse)
def update_profile(
    request_body: ProfileSchema,
    request: Request,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Create or replace the caller's financial profile"""
    request_id = get_request_id(request)

    try:
        ProfileRepository(db).upsert_profile(user_id, request_body.to_domain())
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Profile update failed: {e}", extra={"request_id": request_id, "user_id": user_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    logging.info("Profile updated", extra={"request_id": request_id, "user_id": user_id})
    return ProfileResponse(profile=request_body, source="stored")
