"""
                        Services Module

Contains all business logic services. External integrations follow the
hybrid architecture pattern: a Mock (development) and a Real (production)
implementation behind a common base class.

Services:
    - identity: Accounts, bearer tokens, role authorization
    - catalog: Menu search, suggestions, staff maintenance
    - orders: Order pricing and lifecycle
    - statistics: Kitchen dashboard aggregates
    - notifications: Real-time fan-out hub
    - assistant: Menu chat assistant (Mock / Gemini)
"""

from app.services.catalog import CatalogService
from app.services.identity import IdentityService, authorize
from app.services.orders import OrderService
from app.services.statistics import StatisticsService

__all__ = [
    "CatalogService",
    "IdentityService",
    "OrderService",
    "StatisticsService",
    "authorize",
]
