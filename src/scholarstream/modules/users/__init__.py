"""
Users module - profiles and roles.
"""

from scholarstream.modules.users.models import User, UserRole
from scholarstream.modules.users.repository import UserRepository

__all__ = ["User", "UserRole", "UserRepository"]
