"""
Route Dependencies

Wires request-scoped services from the objects the lifespan placed on
``app.state`` and provides the bearer authentication / role guards.
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.database import get_db
from app.models import User, UserRole
from app.services.catalog import CatalogService
from app.services.identity import IdentityService, authorize
from app.services.notifications import BaseNotifier, get_notifier
from app.services.orders import OrderService
from app.services.statistics import StatisticsService

bearer_scheme = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_identity_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> IdentityService:
    return IdentityService(db, settings)


def get_catalog_service(db: AsyncSession = Depends(get_db)) -> CatalogService:
    return CatalogService(db)


def get_order_service(
    db: AsyncSession = Depends(get_db),
    notifier: BaseNotifier = Depends(get_notifier),
    settings: Settings = Depends(get_app_settings),
) -> OrderService:
    return OrderService(db, notifier, settings)


def get_statistics_service(db: AsyncSession = Depends(get_db)) -> StatisticsService:
    return StatisticsService(db)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    identity: IdentityService = Depends(get_identity_service),
) -> User:
    """Resolve ``Authorization: Bearer <token>`` to a user or fail with 401."""
    token = credentials.credentials if credentials else None
    return await identity.authenticate(token)


def require_roles(*roles: UserRole):
    """
    Build a dependency that authenticates the caller and checks their role.

    Usage:
        @router.get("/", dependencies=[Depends(require_roles(UserRole.STAFF))])
    """
    async def guard(user: User = Depends(get_current_user)) -> User:
        return authorize(user, roles)

    return guard
