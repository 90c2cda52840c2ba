"""
FastAPI Application - REST API for the puzzle.

Endpoints:
    POST   /api/v1/sessions                      Start a play session
    GET    /api/v1/sessions                      List live sessions
    GET    /api/v1/sessions/{id}                 Get session status
    DELETE /api/v1/sessions/{id}                 End session
    GET    /api/v1/sessions/{id}/state           Get puzzle state
    POST   /api/v1/sessions/{id}/items/{item}    Load or unload an item
    POST   /api/v1/sessions/{id}/cross           Row the boat across
    POST   /api/v1/sessions/{id}/reset           Start over
    GET    /api/v1/sessions/{id}/events          Logged events
    GET    /api/v1/sessions/{id}/export.csv      Logged events as CSV

Refused moves (wrong shore, full boat, finished game) are not errors:
they come back as 200 with success=false and a warning to display.
"""

from typing import Union
import logging
import os

from .schemas import ErrorResponse, ErrorCode

# Environment configuration
CROSSING_ENV = os.getenv("CROSSING_ENV", "development")
CROSSING_LOG_DIR = os.getenv("CROSSING_LOG_DIR", None)
CROSSING_LOG_LEVEL = os.getenv("CROSSING_LOG_LEVEL", "INFO")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

logger = logging.getLogger("crossing.api")


def validation_error(errors) -> ErrorResponse:
    """ErrorResponse for a request that failed schema validation."""
    return ErrorResponse(
        error="Request validation failed",
        error_code=ErrorCode.VALIDATION_ERROR,
        details={"errors": [
            {"loc": [str(part) for part in e.get("loc", ())], "msg": e.get("msg", "")}
            for e in errors
        ]},
    )


def internal_error() -> ErrorResponse:
    """ErrorResponse for an unexpected server fault. Details stay in the log."""
    return ErrorResponse(error="Internal server error", error_code=ErrorCode.INTERNAL_ERROR)


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    from fastapi import FastAPI, Request
    from fastapi.exceptions import RequestValidationError
    from fastapi.middleware.cors import CORSMiddleware
    from fastapi.responses import JSONResponse, PlainTextResponse

    from .service import APIService
    from .schemas import (
        CreateSessionRequest,
        SessionResponse,
        GameStateInfo,
        MoveResponse,
        EventLogResponse,
        SessionListResponse,
        EndSessionResponse,
        HealthResponse,
    )
    from ..session import SessionManager
    from ..move_log import open_store
    from .. import __version__

    logging.basicConfig(
        level=CROSSING_LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Crossing Puzzle API",
        description="""
River crossing puzzle - farmer, cat, rabbit and vegetable.

## Rules

- The boat holds the farmer and at most one passenger.
- Items board only from the shore the boat is at.
- Left without the farmer, the cat eats the rabbit and the rabbit eats the vegetable.

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist |
| `INVALID_ITEM` | Item is not cat, rabbit or vegetable |
| `VALIDATION_ERROR` | Request body failed validation (422) |
| `INTERNAL_ERROR` | Unexpected server fault (500) |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService(
        session_manager=SessionManager(store=open_store(CROSSING_LOG_DIR)),
    )

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(error: ErrorResponse) -> JSONResponse:
        """Map a service error to its HTTP status."""
        status_code = {
            ErrorCode.SESSION_NOT_FOUND: 404,
            ErrorCode.VALIDATION_ERROR: 422,
            ErrorCode.INTERNAL_ERROR: 500,
        }.get(error.error_code, 400)
        return JSONResponse(status_code=status_code, content=error.model_dump(mode="json"))

    def or_error(response):
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return make_error_response(validation_error(exc.errors()))

    @app.exception_handler(Exception)
    async def handle_internal_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return make_error_response(internal_error())

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        tags=["Sessions"],
        summary="Start a new play session",
    )
    async def create_session(body: CreateSessionRequest) -> SessionResponse:
        """Start a fresh puzzle for a player. Session numbers count up per player."""
        return api_service.create_session(body)

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List live sessions",
    )
    async def list_sessions() -> SessionListResponse:
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session status",
    )
    async def get_session(session_id: str) -> Union[SessionResponse, JSONResponse]:
        return or_error(api_service.get_session(session_id))

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a play session",
    )
    async def end_session(session_id: str) -> EndSessionResponse:
        """End a session. An unfinished puzzle is logged as abandoned."""
        success = api_service.end_session(session_id)
        return EndSessionResponse(success=success, session_id=session_id)

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/sessions/{session_id}/state",
        response_model=GameStateInfo,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Get current puzzle state",
    )
    async def get_game_state(session_id: str) -> Union[GameStateInfo, JSONResponse]:
        return or_error(api_service.get_game_state(session_id))

    @app.post(
        "/api/v1/sessions/{session_id}/items/{item}",
        response_model=MoveResponse,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Load an item onto the boat, or unload it",
    )
    async def load_or_unload(session_id: str, item: str) -> Union[MoveResponse, JSONResponse]:
        return or_error(api_service.load_or_unload(session_id, item))

    @app.post(
        "/api/v1/sessions/{session_id}/cross",
        response_model=MoveResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Row the boat to the other shore",
    )
    async def cross(session_id: str) -> Union[MoveResponse, JSONResponse]:
        return or_error(api_service.cross(session_id))

    @app.post(
        "/api/v1/sessions/{session_id}/reset",
        response_model=MoveResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Start the puzzle over",
    )
    async def reset(session_id: str) -> Union[MoveResponse, JSONResponse]:
        return or_error(api_service.reset(session_id))

    # =========================================================================
    # Move Log Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/sessions/{session_id}/events",
        response_model=EventLogResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Move Log"],
        summary="Logged events of the current attempt",
    )
    async def get_events(session_id: str) -> Union[EventLogResponse, JSONResponse]:
        return or_error(api_service.get_events(session_id))

    @app.get(
        "/api/v1/sessions/{session_id}/export.csv",
        responses={404: {"model": ErrorResponse}},
        tags=["Move Log"],
        summary="Logged events of the current attempt as CSV",
    )
    async def export_csv(session_id: str):
        response = api_service.export_csv(session_id)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return PlainTextResponse(response, media_type="text/csv")

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        return HealthResponse(
            status="healthy",
            service="crossing-engine",
            version=__version__,
        )

    logger.info("Crossing API ready (%s)", CROSSING_ENV)
    return app
