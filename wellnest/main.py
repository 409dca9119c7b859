"""
Main FastAPI application
"""
import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from wellnest.config import settings
from wellnest.database.connection import init_database
from wellnest.errors import WellnestError
from wellnest.routes import epds, export, health, physical, pregnancy

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# Create FastAPI app
app = FastAPI(
    title="WellNest Backend API",
    description="Pregnancy progress, EPDS and physical health check-ins for the WellNest app",
    version="1.0.0"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=settings.CORS_ALLOW_METHODS,
    allow_headers=settings.CORS_ALLOW_HEADERS,
)


@app.exception_handler(WellnestError)
async def wellnest_error_handler(request: Request, exc: WellnestError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s: %s", request.method, request.url.path, type(exc).__name__, exc.detail)
    return JSONResponse(status_code=exc.status_code, content=exc.to_content())


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    errors = jsonable_encoder(exc.errors())
    fields = [".".join(str(part) for part in error.get("loc", ())) for error in errors]
    return JSONResponse(
        status_code=422,
        content={
            "status": "error",
            "detail": f"Invalid request: {', '.join(fields)}",
            "error_type": "RequestValidationError",
            "errors": errors,
        }
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"status": "error", "detail": exc.detail, "error_type": "HTTPException"},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error in %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"status": "error", "detail": str(exc), "error_type": type(exc).__name__}
    )


# Initialize database
init_database()

# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(pregnancy.router, tags=["Pregnancy"])
app.include_router(epds.router, tags=["Mental"])
app.include_router(physical.router, tags=["Physical"])
app.include_router(export.router, tags=["Export"])
