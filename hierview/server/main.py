"""FastAPI server entry point"""

import logging
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hierview import __version__
from hierview.config import settings
from hierview.server.api.routes import health, tree


def setup_logging():
    """Configure logging with file output"""
    logs_dir = Path(settings.log_dir)
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_file = logs_dir / "server.log"

    handlers = [
        logging.StreamHandler(),
        RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        ),
    ]

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    return logging.getLogger(__name__), log_file


logger, log_file_path = setup_logging()
logger.info(f"Logs written to: {log_file_path}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown"""
    logger.info(f"Starting tree server, data file: {settings.data_file}")
    yield
    logger.info("Server stopped")


app = FastAPI(
    title="hierview API",
    description="Storage for the hierarchy editor tree",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request, call_next):
    """Log all incoming requests"""
    logger.info(f">>> Incoming request: {request.method} {request.url}")
    response = await call_next(request)
    logger.info(f"<<< Response: {response.status_code}")
    return response


app.include_router(health.router, prefix="/api/v1", tags=["health"])
app.include_router(tree.router, prefix="/api/v1/tree", tags=["tree"])


def run():
    import uvicorn

    uvicorn.run(
        "hierview.server.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level="info",
        access_log=True,
    )


if __name__ == "__main__":
    run()
