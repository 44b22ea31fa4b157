import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

load_dotenv()

from app.config import settings
from app.core.logging_config import configure_logging

# IMPORT ROUTERS
from app.routers.health import router as health_router
from app.routers.lawyers import router as lawyers_router
from app.routers.lawyers import validation_exception_handler
from app.routers.scoring import router as scoring_router

configure_logging(settings)
logger = logging.getLogger(__name__)


# SWAGGER UI - tag display order
_OPENAPI_TAGS = [
    {"name": "Root"},
    {"name": "Health"},
    {"name": "Lawyers"},
    {"name": "Scoring"},
]

# FASTAPI APPLICATION CONFIGURATION
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    openapi_tags=_OPENAPI_TAGS,
)

app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

# REGISTER EXCEPTION HANDLERS
app.add_exception_handler(RequestValidationError, validation_exception_handler)

# REGISTER ROUTERS (order matches _OPENAPI_TAGS)
app.include_router(health_router)    # Health
app.include_router(lawyers_router)   # Lawyers
app.include_router(scoring_router)   # Scoring


# ROOT ENDPOINT
@app.get("/", tags=["Root"], summary="Root endpoint")
async def root():
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": {"swagger": "/docs", "redoc": "/redoc"},
        "upload": f"{settings.API_V1_PREFIX}/lawyers/upload",
        "status": "running",
    }


# STARTUP EVENT
@app.on_event("startup")
async def startup_event():
    logger.info(
        f"Starting {settings.APP_NAME} v{settings.APP_VERSION} "
        f"(env={settings.APP_ENV}, storage={settings.STORAGE_BACKEND})"
    )
    if settings.PREPROCESS_URL:
        logger.info(f"Remote preprocessing enabled: {settings.PREPROCESS_URL}")


# SHUTDOWN EVENT
@app.on_event("shutdown")
async def shutdown_event():
    logger.info(f"Shutting down {settings.APP_NAME}...")


# RUN WITH UVICORN
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
