"""Dependency injection for FastAPI endpoints"""

from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from capstack_gateway.domain.exceptions import AuthenticationError
from capstack_gateway.domain.profiles import ProfileRepository
from capstack_gateway.infrastructure.clients.notifications import NotificationClient
from capstack_gateway.infrastructure.database import repositories
from capstack_gateway.infrastructure.database.session import get_db
from capstack_gateway.infrastructure.security.tokens import decode_access_token

bearer = HTTPBearer(auto_error=False)


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_token_payload(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer)) -> dict:
    """Decode the bearer token; 401 when it is absent or invalid"""
    if credentials is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="No token provided")

    try:
        return decode_access_token(credentials.credentials)
    except AuthenticationError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))


def get_current_user_id(payload: dict = Depends(get_token_payload)) -> int:
    return payload["user_id"]


def get_profile_repository(db: Session = Depends(get_db)) -> ProfileRepository:
    """Provide the profile store the calculators read from"""
    return repositories.ProfileRepository(db)


def get_notification_client() -> NotificationClient:
    """Provide notification webhook client instance"""
    return NotificationClient()
