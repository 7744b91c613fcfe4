from fastapi import Request
from errors import OriginNotAllowed


async def verify_origin_middleware(request: Request):
    """
    Reject cross-origin requests from origins outside the allow-list

    Requests without an Origin header (server-to-server, curl) pass.

    Args:
        request: FastAPI request object

    Raises:
        OriginNotAllowed: If the Origin header is not allow-listed
    """
    origin = request.headers.get("Origin")
    if origin is None:
        return

    if origin not in request.app.state.settings.cors_origins:
        raise OriginNotAllowed()
