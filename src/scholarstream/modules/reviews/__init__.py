"""Reviews module - ratings and comments on scholarships."""

from scholarstream.modules.reviews.models import Review

__all__ = ["Review"]
