"""ToyRotator API: callable functions served over FastAPI."""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware

from toyrotator.config import get_settings
from toyrotator.dependencies import _check_local_mode
from toyrotator.middleware.error_handler import ErrorHandlerMiddleware, register_exception_handlers
from toyrotator.utils.logger import configure_logging, get_logger

settings = get_settings()
configure_logging(debug=settings.debug)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    local = _check_local_mode()
    logger.info(
        f"{settings.app_name} {settings.api_version} starting",
        extra={"extra_data": {
            "environment": settings.environment,
            "store": "local" if local else "firestore",
            "aiEnabled": bool(settings.openai_api_key),
        }},
    )

    if local:
        logger.info("Local dev mode: sign in through POST /api/v1/auth/dev-token")
    else:
        from toyrotator.services.firebase.auth_service import FirebaseAuthService
        FirebaseAuthService.initialize(settings.firebase_credentials_path)

    if not settings.openai_api_key:
        logger.warning("OPENAI_API_KEY is not set, AI functions will fail with internal")

    yield

    logger.info(f"{settings.app_name} stopped")


app = FastAPI(
    title=settings.app_name,
    description="Toy rotation planning: households, children, toys, rotations and AI advice",
    version=settings.api_version,
    lifespan=lifespan,
)

register_exception_handlers(app)

# Last added is outermost: CORS wraps the error handler.
app.add_middleware(ErrorHandlerMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["POST", "GET", "OPTIONS"],
    allow_headers=["*"],
)

from toyrotator.api.v1.router import router as v1_router  # noqa: E402

app.include_router(v1_router)


@app.get("/health", status_code=status.HTTP_200_OK, tags=["Health"])
async def health_check() -> dict:
    """Liveness check for the load balancer."""
    return {
        "success": True,
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.api_version,
        "store": "local" if _check_local_mode() else "firestore",
    }


@app.get("/", status_code=status.HTTP_200_OK, tags=["Root"])
async def root() -> dict:
    return {
        "success": True,
        "message": f"{settings.app_name} API",
        "functions": "/api/v1/functions/{name}",
        "docs_url": app.docs_url,
    }


if __name__ == "__main__":
    uvicorn.run(
        "toyrotator.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
    )
