from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn
from contextlib import asynccontextmanager
import asyncio
import datetime

# Import core modules
from core.config import DEFAULT_SECRET_KEY, settings
from core.exceptions import ExpenseTrackerError
from utils.logger import logger


def build_store():
    """Create the store selected by STORE_BACKEND."""
    if settings.STORE_BACKEND == "memory":
        from services.memory_store import MemoryStore
        logger.info("Using in-memory store")
        return MemoryStore()

    from connect_db import init_db
    from services.sql_store import SQLStore
    logger.info("Using SQL store")
    init_db()
    return SQLStore()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""

    logger.info("Starting Expense Tracker Backend...")

    from services.auth_service import AuthService
    from services.ledger_service import LedgerService
    from core.dependencies import set_services

    store = build_store()
    set_services(AuthService(store, settings), LedgerService(store))
    if settings.SECRET_KEY == DEFAULT_SECRET_KEY:
        logger.warning("SECRET_KEY is the built-in default; set it in the environment")
    logger.info("All services initialized successfully!")

    yield

    # Cleanup
    logger.info("Shutting down Expense Tracker Backend...")
    set_services(None, None)


# Create FastAPI app
app = FastAPI(
    title="Expense Tracker",
    description="Backend API for recording personal expenses per user",
    version=settings.VERSION,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(
    TrustedHostMiddleware,
    allowed_hosts=settings.ALLOWED_HOSTS
)


@app.middleware("http")
async def request_timeout(request: Request, call_next):
    """Answer 504 when a request runs longer than REQUEST_TIMEOUT_SECONDS."""
    try:
        return await asyncio.wait_for(call_next(request), timeout=settings.REQUEST_TIMEOUT_SECONDS)
    except asyncio.TimeoutError:
        logger.error(f"Request timed out: {request.method} {request.url.path}")
        return JSONResponse(status_code=504, content={"error": "Request timed out"})


@app.exception_handler(ExpenseTrackerError)
async def expense_tracker_error_handler(request: Request, exc: ExpenseTrackerError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# Import routers after app creation to avoid circular imports
from api import auth, ledger

app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(ledger.router, prefix="/expenses", tags=["Expenses"])


@app.get("/")
async def root():
    """Root endpoint for health check."""
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.VERSION,
        "status": "running",
    }


@app.get("/health")
async def health_check_endpoint():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
    }


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        server_header=False,
        proxy_headers=True
    )
