"""FastAPI application entry point."""

import logging
import os
import tomllib
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Must run before settings are read
load_dotenv()

from adapter.mongodb.connection import get_mongodb_client
from adapter.mongodb.indexes import ensure_all_indexes
from api.dependencies import get_settings
from api.routes import auth, health, users
from utils.logging import setup_structured_logging

setup_structured_logging(os.getenv("LOG_LEVEL", "INFO").upper())

logger = logging.getLogger(__name__)

# Read version from pyproject.toml (single source of truth)
_project_root = Path(__file__).resolve().parent.parent.parent
with open(_project_root / "pyproject.toml", "rb") as f:
    VERSION = tomllib.load(f)["project"]["version"]

SERVICE_NAME = "User Accounts API"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: fail fast on bad configuration, then ensure indexes."""
    settings = get_settings()

    client = get_mongodb_client(settings.mongo_url)
    if client:
        if ensure_all_indexes(client[settings.mongodb_database]):
            logger.info("MongoDB indexes verified/created successfully")
        else:
            logger.warning("Failed to create some MongoDB indexes")
    else:
        logger.warning("MongoDB unavailable, skipping index creation")

    if not settings.email_verification_enabled:
        logger.info("Email verification disabled")

    yield


app = FastAPI(
    title=SERVICE_NAME,
    description="User accounts, bearer token authentication and email verification",
    version=VERSION,
    lifespan=lifespan,
)

# Bearer tokens travel in the Authorization header, so credentials are only
# allowed with an explicit origin list (browsers reject them with '*')
cors_origins_env = os.getenv("CORS_ORIGINS", "*")
if cors_origins_env == "*":
    cors_origins = ["*"]
    allow_credentials = False
    logger.warning("CORS configured with wildcard origin ('*')")
else:
    cors_origins = [origin.strip() for origin in cors_origins_env.split(",") if origin.strip()]
    allow_credentials = True

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(users.router)
app.include_router(auth.router)
app.include_router(health.router)


@app.get("/")
def root():
    return {
        "service": SERVICE_NAME,
        "version": VERSION,
        "status": "running",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=int(os.getenv("PORT", 8000)),
        access_log=False,
    )
