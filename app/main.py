# app/main.py
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
import os
import time
import uuid

from app.api.routes import router, chat_session
from app.config import LOG_FILE, LOG_LEVEL
from app.observability.logger import setup_logging, get_logger

# Initialize logging FIRST
setup_logging(
    log_level=os.getenv("LOG_LEVEL", LOG_LEVEL),
    log_file=os.getenv("LOG_FILE", LOG_FILE),
)
logger = get_logger(__name__)

app = FastAPI(
    title="Document Q&A API",
    description="Upload one document and ask questions about it",
    version="1.0.0"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Assign a request id and log every HTTP request with its latency."""

    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    logger.info(
        "request_started",
        extra={
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "client_ip": request.client.host if request.client else None
        }
    )

    start_time = time.time()

    try:

        response = await call_next(request)

    except Exception as e:

        logger.error(
            "request_failed",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "latency_seconds": round(time.time() - start_time, 3),
                "error": str(e),
                "error_type": type(e).__name__
            },
            exc_info=True
        )

        raise

    logger.info(
        "request_completed",
        extra={
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "latency_seconds": round(time.time() - start_time, 3)
        }
    )

    return response


app.include_router(router)


@app.on_event("startup")
async def startup_event():

    settings = chat_session.dispatcher.settings

    logger.info(
        "application_startup",
        extra={
            "version": "1.0.0",
            "model": settings.model,
            "demo_mode": settings.demo_mode,
        },
    )

    if not settings.api_key:

        logger.warning(
            "missing_api_key",
            extra={
                "warning_detail":
                "GEMINI_API_KEY not set. Questions will fail until it is configured."
            }
        )


@app.on_event("shutdown")
async def shutdown_event():

    await chat_session.dispatcher.llm_client.aclose()

    logger.info("application_shutdown")


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):

    request_id = getattr(request.state, "request_id", "unknown")

    logger.error(
        "unhandled_exception",
        extra={
            "request_id": request_id,
            "path": request.url.path,
            "error": str(exc),
            "error_type": type(exc).__name__
        },
        exc_info=True
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "An internal error occurred. Please try again.",
            "request_id": request_id,
            "error_type": type(exc).__name__
        }
    )


@app.get("/")
async def root():

    return {
        "message": "Document Q&A API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
    }
