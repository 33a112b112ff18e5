"""
Auth Endpoints

    - POST /api/auth/register
    - POST /api/auth/login
    - GET  /api/auth/me
    - PUT  /api/auth/me
"""

import logging

from fastapi import APIRouter, Depends, status

from app.api.deps import get_current_user, get_identity_service
from app.models import User
from app.schemas import (
    ApiResponse,
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    ProfileUpdate,
    RegisterRequest,
    UserResponse,
)
from app.services.identity import IdentityService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/register",
    response_model=ApiResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    summary="Register a student or faculty account",
)
async def register(
    body: RegisterRequest,
    identity: IdentityService = Depends(get_identity_service),
) -> ApiResponse[UserResponse]:
    """Roles other than student/faculty are stored as student."""
    user = await identity.register(body.name, body.email, body.password, body.role)
    return ApiResponse(data=UserResponse.model_validate(user))


@router.post(
    "/login",
    response_model=ApiResponse[LoginResponse],
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)
async def login(
    body: LoginRequest,
    identity: IdentityService = Depends(get_identity_service),
) -> ApiResponse[LoginResponse]:
    token, user = await identity.login(body.email, body.password)
    return ApiResponse(data=LoginResponse(token=token, user=UserResponse.model_validate(user)))


@router.get("/me", response_model=ApiResponse[UserResponse])
async def read_me(user: User = Depends(get_current_user)) -> ApiResponse[UserResponse]:
    return ApiResponse(data=UserResponse.model_validate(user))


@router.put(
    "/me",
    response_model=ApiResponse[UserResponse],
    responses={400: {"model": ErrorResponse}},
)
async def update_me(
    body: ProfileUpdate,
    user: User = Depends(get_current_user),
    identity: IdentityService = Depends(get_identity_service),
) -> ApiResponse[UserResponse]:
    updated = await identity.update_profile(user, body.name, body.email, body.phone)
    return ApiResponse(data=UserResponse.model_validate(updated))
