"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from bizplan.api.routes import router
from bizplan.config import get_settings
from bizplan.database.session import build_engine, build_session_maker, close_db, init_db
from bizplan.database.store import PlanStore
from bizplan.errors import InvalidRequest, PlanError
from bizplan.llm.completion import CompletionClient
from bizplan.llm.openrouter import OpenRouterAdapter
from bizplan.service import PlanService


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")

    engine = build_engine(settings)
    await init_db(engine)
    logger.info("Database initialized")

    # Adapter is built on first use; a missing API key fails generation requests only
    completion = CompletionClient(lambda: OpenRouterAdapter(settings=settings), settings=settings)
    store = PlanStore(build_session_maker(engine))
    app.state.plan_service = PlanService(completion, store)

    yield

    # Shutdown
    logger.info("Shutting down...")
    await completion.close()
    await close_db(engine)


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Business plan generator API",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PlanError)
async def plan_error_handler(request: Request, exc: PlanError) -> PlainTextResponse:
    """Plain-text body, structured kind in the X-Error-Kind header."""
    if exc.status_code >= 500:
        logger.error(f"Error Details ({exc.kind}): {exc.message}")
    return PlainTextResponse(
        exc.public_message,
        status_code=exc.status_code,
        headers={"X-Error-Kind": exc.kind},
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> PlainTextResponse:
    """Malformed bodies and query strings are client errors like any other."""
    logger.info(f"Rejected request to {request.url.path}: {exc.errors()}")
    message = "Missing businessName or industry" if request.url.path == "/generate-plan" else "Invalid request"
    return await plan_error_handler(request, InvalidRequest(message))


# Include routes
app.include_router(router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "bizplan.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
    )
