from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from acceleraqa.api import documents, rag
from acceleraqa.core.config import settings, BASE_DIR
from acceleraqa.core.errors import RetrievalError
from acceleraqa.database.connection import create_db_and_tables

import logging
import os

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

HTTP_ERROR_CODES = {
    400: "validation_error",
    401: "unauthorized",
    404: "not_found",
    405: "method_not_allowed",
    413: "payload_too_large",
}

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Document ingestion and retrieval backend for the AcceleraQA compliance assistant."
)

@app.on_event("startup")
async def startup_event():
    logger.info("Starting up application...")
    if settings.DATABASE_URL.startswith("sqlite"):
        # Create the 'data' directory if it doesn't exist
        os.makedirs(BASE_DIR / "data", exist_ok=True)
    # Ensure database tables are created on startup
    create_db_and_tables()
    logger.info("Database tables ensured.")

@app.exception_handler(RetrievalError)
async def retrieval_error_handler(request: Request, exc: RetrievalError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    fields = ", ".join(".".join(str(part) for part in error["loc"]) for error in exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": {"code": "validation_error", "message": f"Invalid request: {fields}"}},
    )

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": {"code": HTTP_ERROR_CODES.get(exc.status_code, "http_error"), "message": str(exc.detail)}},
        headers=getattr(exc, "headers", None),
    )

@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unexpected error while handling {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": {"code": "internal_error", "message": "An unexpected error occurred."}},
    )

@app.get("/")
async def root():
    return {
        "message": "Welcome to the AcceleraQA document retrieval backend!",
        "documentation": "/docs",
        "version": settings.APP_VERSION
    }

app.include_router(documents.router, prefix="/documents", tags=["Documents"])
app.include_router(rag.router, prefix="/rag", tags=["RAG Actions"])
