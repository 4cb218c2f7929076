from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from matti.common.config import ServiceFactory
from matti.common.db_connect import SessionLocal


class UserPopulationMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        """
        Middleware to populate the request state with user information based on the 'x-forwarded-user' header.
        The auth proxy in front of the API sets the header; unknown usernames leave the state empty.
        """
        if request.method == "POST" and request.url.path.rstrip("/").endswith("/users"):
            request.state.user = None
            return await call_next(request)
        x_username = request.headers.get("x-forwarded-user")
        user = None
        if x_username:
            service = ServiceFactory.get_user_service()
            user = await service.get_user_by_username(x_username)
        request.state.user = user
        response = await call_next(request)
        return response


class SessionCleanupMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        """Releases the request's scoped database session once the response is produced."""
        try:
            return await call_next(request)
        finally:
            SessionLocal.remove()
