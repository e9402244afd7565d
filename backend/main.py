import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv

# Load .env from this directory before the package reads its settings
env_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), ".env")
load_dotenv(dotenv_path=env_path)

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from acca_access import init_access_module, router as access_router
from acca_access.config import settings
from acca_access.database import engine

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [%(levelname)s] %(message)s",
    handlers=[logging.StreamHandler()]
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        logger.info("Initializing access module...")
        init_access_module()
        logger.info("Access module initialized.")
    except Exception as e:
        logger.error(f"Startup access module error: {e}")
    yield
    logger.info("Shutting down...")


app = FastAPI(title="ACCA Access API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(access_router)


@app.get("/api/health")
def health_check():
    """Health check endpoint to verify the backend and its database are reachable"""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        raise HTTPException(status_code=503, detail="Database unavailable") from e
    return {"status": "ok", "database": engine.dialect.name}


if __name__ == "__main__":
    import uvicorn

    reload_enabled = os.getenv("BACKEND_RELOAD", "false").lower() == "true"
    backend_host = os.getenv("BACKEND_HOST", "127.0.0.1")
    backend_port = int(os.getenv("BACKEND_PORT", "8000"))
    uvicorn.run("main:app" if reload_enabled else app, host=backend_host, port=backend_port, reload=reload_enabled)
