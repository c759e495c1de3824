"""
PartyRoll FastAPI Application - Main entry point.

PartyRoll manages a political party's membership:

- Members: Public registration, review workflow, bulk approval
- Events: Rallies and meetings, RSVPs, check-in
- Discipline: Disciplinary cases against members
- Cards: Membership card issue, renewal and expiry tracking
- Communications: Broadcast messages resolved against a member filter

All endpoints live under /api. Errors are returned as {"error": ...}.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from partyroll.core.config import settings
from partyroll.core.errors import ActionError
from partyroll.core.logging import configure_logging
from partyroll.db.base import init_db
from partyroll.schemas.common import HealthResponse
from partyroll.api.v1 import api_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    configure_logging()
    # Note: In production, use Alembic migrations instead
    await init_db()
    logger.info("%s started", settings.APP_NAME)
    yield


app = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    description="""
PartyRoll - Membership management for a political party.

## Modules

- **Members**: Registration, approval workflow, jurisdiction filters
- **Events**: Events, RSVPs and check-in
- **Disciplinary cases**: Case tracking per member
- **Membership cards**: Issue, renewal, expiry reminders
- **Communications**: Drafts, recipient filters and send
- **Statistics**: Dashboard aggregates
    """,
    lifespan=lifespan,
    docs_url="/api/docs" if settings.DEBUG else None,
    redoc_url="/api/redoc" if settings.DEBUG else None,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# HEALTH CHECK
# ============================================================================

@app.get("/api/health", response_model=HealthResponse, tags=["health"])
async def health_check():
    """Health check endpoint."""
    return HealthResponse(code=200, message="API is healthy.")


app.include_router(api_router, prefix=settings.API_PREFIX)


# ============================================================================
# ERROR HANDLERS
# ============================================================================

def error_response(status_code: int, error: str, details=None, headers=None) -> JSONResponse:
    content = {"error": error}
    if details is not None:
        content["details"] = jsonable_encoder(details)
    return JSONResponse(status_code=status_code, content=content, headers=headers)


@app.exception_handler(ActionError)
async def action_error_handler(request: Request, exc: ActionError):
    """Business, validation and not-found errors raised by services."""
    return error_response(exc.status_code, exc.message, exc.details)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Bad path or query parameters."""
    return error_response(400, "Validation failed", exc.errors())


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    if settings.DEBUG:
        return error_response(500, str(exc))
    return error_response(500, "Internal server error")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "partyroll.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
