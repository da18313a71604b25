"""POST /v1/auth/* - Registration, login and token verification"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from capstack_gateway.api.v1.schemas import LoginRequest, RegisterRequest, TokenResponse, UserSchema, VerifyResponse
from capstack_gateway.api.dependencies import get_request_id, get_token_payload
from capstack_gateway.infrastructure.database.session import get_db
from capstack_gateway.infrastructure.database.repositories import UserRepository
from capstack_gateway.infrastructure.security.tokens import create_access_token, hash_password, verify_password
from capstack_gateway.domain.exceptions import UserAlreadyExistsError

router = APIRouter()


def _token_response(user) -> TokenResponse:
    return TokenResponse(
        token=create_access_token(user.id, user.email, user.name),
        user=UserSchema(id=user.id, email=user.email, name=user.name),
    )


@router.post("/auth/register", response_model=TokenResponse)
def register(request_body: RegisterRequest, request: Request, db: Session = Depends(get_db)):
    """
    Create an account and return a bearer token.

    The new user has no stored financial profile; scores use the
    default profile until one is saved via PUT /v1/profile.
    """
    request_id = get_request_id(request)
    user_repo = UserRepository(db)

    try:
        user = user_repo.create_user(
            email=request_body.email,
            name=request_body.name,
            password_hash=hash_password(request_body.password),
        )
        db.commit()
    except UserAlreadyExistsError as e:
        db.rollback()
        logging.info(f"Registration rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=400, detail="User already exists")

    logging.info("User registered", extra={"request_id": request_id, "user_id": user.id})
    return _token_response(user)


@router.post("/auth/login", response_model=TokenResponse)
def login(request_body: LoginRequest, request: Request, db: Session = Depends(get_db)):
    """Exchange email and password for a bearer token"""
    request_id = get_request_id(request)
    user = UserRepository(db).get_by_email(request_body.email)

    if user is None or not verify_password(request_body.password, user.password_hash):
        logging.warning("Login rejected", extra={"request_id": request_id, "email": request_body.email})
        raise HTTPException(status_code=401, detail="Invalid credentials")

    return _token_response(user)


@router.post("/auth/verify", response_model=VerifyResponse)
def verify(payload: dict = Depends(get_token_payload)):
    """Check a bearer token and echo its claims"""
    return VerifyResponse(
        valid=True,
        payload={"user_id": payload["user_id"], "email": payload.get("email"), "name": payload.get("name")},
    )
