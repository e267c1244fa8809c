"""FastAPI application entry point."""

import sys
import logging
import tomllib
from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from dotenv import load_dotenv

# Must run before importing modules that read env vars at import time
load_dotenv()

# main.py is at <root>/src/api/main.py
_src_path = Path(__file__).parent.parent
sys.path.insert(0, str(_src_path))

from api.config import get_credential_service, load_settings
from api.routes import admin, auth, health
from adapter.mongodb.connection import get_mongodb_client, DATABASE_NAME
from adapter.mongodb.indexes import ensure_all_indexes
from domain.model.errors import ConfigurationError
from utils.logging import setup_structured_logging

setup_structured_logging()

logger = logging.getLogger(__name__)

# pyproject.toml is the single source of truth for the version
_project_root = _src_path.parent
with open(_project_root / "pyproject.toml", "rb") as f:
    VERSION = tomllib.load(f)["project"]["version"]

SERVICE_NAME = "Evista API"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown logic."""
    # Refuse to serve auth traffic without a signing secret
    try:
        credentials = get_credential_service()
    except ConfigurationError as e:
        logger.critical("Authentication is not configured, refusing to start", extra={"error": str(e)})
        raise
    logger.info("Credential service ready", extra={"tokenTtlSeconds": credentials.token_ttl.total_seconds()})

    client = get_mongodb_client()
    if client:
        if ensure_all_indexes(client[DATABASE_NAME]):
            logger.info("MongoDB indexes verified/created successfully")
        else:
            logger.warning("Failed to create some MongoDB indexes")
    else:
        logger.warning("MongoDB unavailable, skipping index creation")

    yield


app = FastAPI(
    title=SERVICE_NAME,
    description="Personal-finance backend: accounts and session authentication",
    version=VERSION,
    lifespan=lifespan,
)

app.include_router(auth.router)
app.include_router(admin.router)
app.include_router(health.router)


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error("Request hit misconfigured service", extra={"path": request.url.path, "error": str(exc)})
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Authentication service is not configured"},
    )


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": SERVICE_NAME,
        "version": VERSION,
        "status": "running"
    }


def main():
    """Serve the app with uvicorn on the configured PORT."""
    import uvicorn
    settings = load_settings()
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=settings.port,
        access_log=False
    )


if __name__ == "__main__":
    main()
