"""Authentication API routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from flixauth.core.db import get_db
from flixauth.core.security import get_current_claims
from flixauth.schemas.auth import AuthResponse, ProfileResponse, SessionClaims, UserCreate, UserLogin
from flixauth.schemas.common import ErrorResponse, MessageResponse
from flixauth.services.auth_service import AuthService

router = APIRouter(
    prefix="/api",
    tags=["auth"],
    responses={code: {"model": ErrorResponse} for code in (400, 401, 403, 404, 500)},
)


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register_user(
    payload: UserCreate,
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    result = auth_service.register(db, payload)
    return AuthResponse(message=result.message, token=result.token, user=result.user)


@router.post("/login", response_model=AuthResponse)
def login(
    payload: UserLogin,
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    result = auth_service.login(db, payload)
    return AuthResponse(message=result.message, token=result.token, user=result.user)


@router.get("/profile", response_model=ProfileResponse)
def profile(
    claims: SessionClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> ProfileResponse:
    return ProfileResponse(user=auth_service.get_profile(db, claims))


@router.get("/test-db", response_model=MessageResponse)
def test_db(
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    auth_service.check_database(db)
    return MessageResponse(message="Database connection successful")
