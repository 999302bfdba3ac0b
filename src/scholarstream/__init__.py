"""ScholarStream API - scholarship applications backend."""

__version__ = "0.1.0"
