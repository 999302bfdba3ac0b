"""
Scholarships Module

Public browsing of scholarship listings; Admin-only create, update and delete.
"""

from scholarstream.modules.scholarships.models import Scholarship

__all__ = ["Scholarship"]
