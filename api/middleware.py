"""
Request middleware for the FastAPI application.
"""

import structlog
from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from api.models import ErrorResponse
from library.database import MongoConnection

logger = structlog.get_logger(__name__)


class AvailabilityGateMiddleware(BaseHTTPMiddleware):
    """Reject every request with 503 while the store connection is not ready."""

    def __init__(self, app, connection: MongoConnection):
        super().__init__(app)
        self.connection = connection

    async def dispatch(self, request: Request, call_next):
        if self.connection.is_connected:
            return await call_next(request)

        logger.warning("Rejecting request, store unavailable",
                       method=request.method,
                       path=request.url.path,
                       connection_state=self.connection.state.value)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=ErrorResponse(error="Service unavailable").model_dump(exclude_none=True),
        )
