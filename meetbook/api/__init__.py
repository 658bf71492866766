"""
HTTP layer - FastAPI application exposing slot discovery and booking.
"""

from .app import create_app

__all__ = ["create_app"]
