"""
FastAPI main application for the Library API.
"""

import asyncio
from contextlib import asynccontextmanager, suppress
from typing import List, Optional

import structlog
from fastapi import FastAPI, HTTPException, Depends, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.config import config as api_config
from api.database import APIDatabaseService
from api.errors import InvalidIdentifierError, StoreError, StoreUnavailableError
from api.middleware import AvailabilityGateMiddleware
from api.models import (
    AuthorResponse, BookResponse, BookWithAuthorResponse, ErrorResponse
)
from library.database import MongoConnection
from library.seeder import seed_database
from utilities.config import config

# Setup logging
logger = structlog.get_logger(__name__)


def _error_response(status_code: int, error: str, detail: Optional[str] = None, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error=error,
            detail=detail if api_config.debug else None
        ).model_dump(exclude_none=True),
        headers=headers
    )


async def _seed_in_background(connection: MongoConnection) -> None:
    """
    Seed the store once it is reachable.

    Failures are logged instead of raised so the server keeps running.
    """
    await connection.wait_until_connected()
    try:
        await seed_database(connection.database)
    except Exception as e:
        logger.error("Database seeding failed", error=str(e))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    connection: MongoConnection = app.state.connection

    logger.info("Starting Library API")
    await connection.connect()

    if config.reset_database:
        app.state.seed_task = asyncio.create_task(_seed_in_background(connection))

    yield

    logger.info("Shutting down Library API")
    seed_task = app.state.seed_task
    if seed_task is not None and not seed_task.done():
        logger.warning("Cancelling unfinished database seeding")
        seed_task.cancel()
        with suppress(asyncio.CancelledError):
            await seed_task
    await connection.disconnect()


def get_db_service(request: Request) -> APIDatabaseService:
    """Build the database service over the app's store connection."""
    return APIDatabaseService(request.app.state.connection.database)


def create_app(connection: Optional[MongoConnection] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        connection: Store connection handle; built from configuration if omitted
    """
    if connection is None:
        connection = MongoConnection(
            connection_url=config.mongo_url,
            database_name=config.mongo_database,
            server_selection_timeout_ms=config.mongo_server_selection_timeout_ms
        )

    app = FastAPI(
        title=api_config.api_title,
        description=api_config.api_description,
        version=api_config.api_version,
        lifespan=lifespan
    )
    app.state.connection = connection
    app.state.seed_task = None

    # The gate is added first so CORS wraps it and 503s carry CORS headers
    app.add_middleware(AvailabilityGateMiddleware, connection=connection)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=api_config.cors_origins,
        allow_credentials=api_config.cors_allow_credentials,
        allow_methods=api_config.cors_allow_methods,
        allow_headers=api_config.cors_allow_headers,
    )

    # Exception handlers
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions."""
        return _error_response(exc.status_code, str(exc.detail), headers=exc.headers)

    @app.exception_handler(InvalidIdentifierError)
    async def invalid_identifier_handler(request: Request, exc: InvalidIdentifierError):
        """Handle malformed path identifiers."""
        logger.info("Invalid identifier", identifier=exc.identifier, path=request.url.path)
        return _error_response(status.HTTP_400_BAD_REQUEST, "Invalid author id", detail=str(exc))

    @app.exception_handler(StoreUnavailableError)
    async def store_unavailable_handler(request: Request, exc: StoreUnavailableError):
        """Handle store connection failures raised mid-request."""
        return _error_response(status.HTTP_503_SERVICE_UNAVAILABLE, "Service unavailable", detail=str(exc))

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        """Handle any other store failure."""
        logger.error("Store error", operation=exc.operation, error=str(exc), path=request.url.path)
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", detail=str(exc))

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle general exceptions."""
        logger.error("Unhandled exception", error=str(exc), path=request.url.path)
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", detail=str(exc))

    @app.get("/", response_class=PlainTextResponse, tags=["Health"])
    async def root():
        """Liveness check."""
        return api_config.greeting

    # Authors endpoints
    @app.get("/authors", response_model=List[AuthorResponse], tags=["Authors"])
    async def get_authors(db_service: APIDatabaseService = Depends(get_db_service)):
        """Get all authors."""
        return await db_service.get_authors()

    @app.get("/authors/{author_id}", response_model=AuthorResponse, tags=["Authors"])
    async def get_author(author_id: str, db_service: APIDatabaseService = Depends(get_db_service)):
        """
        Get a single author by ID.

        - **author_id**: Author identifier (MongoDB ObjectId)
        """
        author = await db_service.get_author_by_id(author_id)
        if author is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Author not found"
            )
        return author

    @app.get("/authors/{author_id}/books", response_model=List[BookResponse], tags=["Authors"])
    async def get_author_books(author_id: str, db_service: APIDatabaseService = Depends(get_db_service)):
        """
        Get the books written by an author, with the author left as a raw id.

        - **author_id**: Author identifier (MongoDB ObjectId)
        """
        books = await db_service.get_books_by_author(author_id)
        if books is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Author not found"
            )
        return books

    # Books endpoints
    @app.get("/books", response_model=List[BookWithAuthorResponse], tags=["Books"])
    async def get_books(db_service: APIDatabaseService = Depends(get_db_service)):
        """Get all books with their author resolved inline."""
        return await db_service.get_books_with_authors()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=api_config.host,
        port=api_config.port,
        log_level="info"
    )
