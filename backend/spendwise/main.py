import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api import api_router
from .config import configure_logging, get_config
from .database import close_database, is_database_open, open_database
from .errors import SpendwiseError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown events."""
    config = get_config()
    configure_logging(config.log_level)
    if not is_database_open():
        open_database(config.resolved_database_path())
    yield
    # Cleanup on shutdown
    close_database()


app = FastAPI(
    title="Spendwise",
    description="Monthly budgets, categories and multi-currency spending",
    version="0.1.0",
    lifespan=lifespan
)

# CORS for the mobile client's dev server
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_config().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SpendwiseError)
async def spendwise_error_handler(request: Request, exc: SpendwiseError):
    """Render domain errors as `{code, message}` so clients branch on the code."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# API routes
app.include_router(api_router, prefix="/api")


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "ok", "database": is_database_open()}
