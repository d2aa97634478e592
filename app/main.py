from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import get_settings
from app.core.app_state import state
from app.exceptions import ConversationConflictError, NotFoundError
from app.infra.logging_config import LoggingConfig, get_logger
from app.routers import conversations, messages, webhook_events, webhooks

API_PREFIX = "/api/v1"

logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    if not app.state.testing:
        state.start(settings)
    logger.info("%s started (env=%s)", settings.app_name, settings.environment)
    yield
    state.stop()


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


async def conflict_handler(
    request: Request, exc: ConversationConflictError
) -> JSONResponse:
    return JSONResponse(status_code=409, content={"detail": str(exc)})


def create_app(testing: bool = False) -> FastAPI:
    """Build the application. `testing` skips JWT checks and the event bus."""
    LoggingConfig()
    settings = get_settings()

    app = FastAPI(title=settings.app_name, version="0.1.0", lifespan=lifespan)
    app.state.testing = testing

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(ConversationConflictError, conflict_handler)

    app.include_router(webhooks.router, prefix=API_PREFIX)
    app.include_router(conversations.router, prefix=API_PREFIX)
    app.include_router(messages.router, prefix=API_PREFIX)
    app.include_router(webhook_events.router, prefix=API_PREFIX)

    @app.get("/health")
    def health_check():
        return {"status": "healthy", "service": settings.app_name}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=get_settings().port)
