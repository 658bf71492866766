"""
API-key guard and FastAPI dependencies giving access to the app's services.

The key is checked in HTTP middleware rather than a route dependency, so a
request without a valid key is refused before its body is parsed.
"""

import secrets
from typing import Awaitable, Callable, Collection, Optional

from fastapi import Request, Response

from ..domain.exceptions import Unauthorized
from ..services import AvailabilityService, BookingService
from .errors import unauthorized_handler

API_KEY_HEADER = "x-api-key"


def require_api_key(provided: Optional[str], expected: str) -> None:
    """Raise ``Unauthorized`` unless ``provided`` matches the configured key."""
    if provided is None or not secrets.compare_digest(provided.encode(), expected.encode()):
        raise Unauthorized("Invalid or missing API Key")


def api_key_middleware(
    public_paths: Collection[str],
) -> Callable[[Request, Callable[[Request], Awaitable[Response]]], Awaitable[Response]]:
    """Build an ``http`` middleware enforcing the key on every path but ``public_paths``."""

    async def check_api_key(request: Request, call_next):
        if request.url.path not in public_paths:
            try:
                require_api_key(request.headers.get(API_KEY_HEADER), request.app.state.api_key)
            except Unauthorized as exc:
                return await unauthorized_handler(request, exc)

        return await call_next(request)

    return check_api_key


def get_availability(request: Request) -> AvailabilityService:
    return request.app.state.availability


def get_booking(request: Request) -> BookingService:
    return request.app.state.booking
