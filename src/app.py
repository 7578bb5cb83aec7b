"""Main FastAPI application module.

This module builds the FastAPI application, wires the shared Database handle
and credential verifier into ``app.state`` and registers all route handlers.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routes import admin, lecturer, student
from api.routes.responses import fail
from config import (
    API_HOST,
    API_PORT,
    CORS_ALLOWED_ORIGINS,
    CREDENTIAL_SCHEME,
    REQUIRE_ENROLLMENT,
    SEED_ON_STARTUP,
)
from core.database import Database
from core.logging_config import setup_logging
from core.security import CredentialVerifier, create_credential_verifier
from utils.seed import seed_initial_data

logger = logging.getLogger(__name__)


def create_app(
    database: Optional[Database] = None,
    verifier: Optional[CredentialVerifier] = None,
    seed: bool = SEED_ON_STARTUP,
    require_enrollment: bool = REQUIRE_ENROLLMENT,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        database: Database handle; one is created from DATABASE_URL if omitted.
        verifier: Credential verifier; built from CREDENTIAL_SCHEME if omitted.
        seed: Seed the default roster into empty tables on startup.
        require_enrollment: Reject attendance from students not enrolled in
            the course.

    Returns:
        Configured FastAPI application.
    """
    database = database or Database()
    verifier = verifier or create_credential_verifier(CREDENTIAL_SCHEME)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database.init_db()
        if seed:
            with database.session() as db:
                seed_initial_data(db, verifier)
        logger.info("Attendance Tracker API ready")
        try:
            yield
        finally:
            database.dispose()

    app = FastAPI(
        title="Attendance Tracker API",
        description="Backend API for classroom attendance codes and enrollment.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.database = database
    app.state.credential_verifier = verifier
    app.state.require_enrollment = require_enrollment

    # Configure CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = exc.errors()
        fields = ", ".join(
            str(error["loc"][-1]) for error in errors if error.get("loc")
        )
        logger.info("Rejected malformed request to %s: %s", request.url.path, fields)
        # Missing fields are business failures, reported like any other
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content=fail(f"Missing or invalid fields: {fields}" if fields else "Invalid request."),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=fail("Server error"),
        )

    # Register route handlers
    app.include_router(student.router)
    app.include_router(lecturer.router)
    app.include_router(admin.router)

    @app.get("/", summary="API root", tags=["Info"])
    def root() -> dict:
        """API root, returns API information and documentation links."""
        return {
            "name": "Attendance Tracker API",
            "version": "1.0.0",
            "docs": {
                "swagger": "/docs",
                "redoc": "/redoc",
            },
            "health": "/api/health",
        }

    @app.get("/api/health", summary="Health check", tags=["Health"])
    def health() -> dict:
        """Health check endpoint.

        Returns:
            Dictionary with status "ok".
        """
        return {"status": "ok"}

    return app


setup_logging()

app = create_app()


# --- Startup code for direct execution ---
if __name__ == "__main__":
    import uvicorn

    server_url = f"http://{API_HOST}:{API_PORT}"
    print(f"Attendance Tracker API: {server_url}")
    print(f"API docs: {server_url}/docs")

    uvicorn.run("app:app", host=API_HOST, port=API_PORT, reload=True)
