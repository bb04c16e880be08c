"""FastAPI application for Storyforest."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .arq_pool import close_pool, init_pool
from .config import CORS_ORIGINS, LOG_JSON, LOG_LEVEL
from .database.firebase import init_firebase
from .errors import CallableError, callable_error_handler, internal, invalid_argument
from .logging import configure_logging
from .routes import admin, books, drafts, stories, users, voice

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    configure_logging(json_format=LOG_JSON, level=LOG_LEVEL)

    init_firebase()
    logger.info("Firebase initialized")

    # Voice registration needs the queue; everything else works without it
    try:
        await init_pool()
        logger.info("ARQ pool initialized")
    except (OSError, ConnectionError) as e:
        logger.warning(f"ARQ pool not available - voice registration disabled: {e}")

    yield

    await close_pool()


app = FastAPI(
    title="Storyforest API",
    description="""
Personalised illustrated storybooks for children.

## Features
- **Stories**: Write a 10-15 page story from a child's profile (or a family photo) and illustrate it
- **Library**: Publish, edit, translate and narrate books
- **Voices**: Clone a parent's voice and narrate the whole library with it in the background

Errors are returned as `{"error": {"status": "INVALID_ARGUMENT", "message": "..."}}`.
    """,
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(CallableError, callable_error_handler)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed bodies as invalid-argument."""
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"{location}: {first.get('msg', 'Invalid request')}" if location else "Invalid request"
    return await callable_error_handler(request, invalid_argument(message))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything a route did not map becomes internal, in the same error shape."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return await callable_error_handler(request, internal(f"{request.method} {request.url.path} failed: {exc}"))


app.include_router(stories.router, prefix="/generate", tags=["Generation"])
app.include_router(voice.router, prefix="/voice", tags=["Voice"])
app.include_router(books.router, prefix="/books", tags=["Books"])
app.include_router(drafts.router, prefix="/drafts", tags=["Drafts"])
app.include_router(users.router, prefix="/users", tags=["Users"])
app.include_router(admin.router, prefix="/admin", tags=["Admin"])


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
