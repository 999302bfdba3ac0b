"""
Core module - Configuration, database, security, and shared services.
"""

from scholarstream.core.config import get_settings, settings
from scholarstream.core.database import Base, close_db, get_db, init_db
from scholarstream.core.exceptions import ServiceError
from scholarstream.core.redis import close_redis, get_redis, init_redis

__all__ = [
    # Config
    "settings",
    "get_settings",
    # Database
    "Base",
    "get_db",
    "init_db",
    "close_db",
    # Redis
    "get_redis",
    "init_redis",
    "close_redis",
    # Errors
    "ServiceError",
]
