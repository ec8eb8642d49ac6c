# Main application file



import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.database import engine, Base
from app.core.rate_limiter import limiter
from app.core.config import settings
from app.core.errors import InventoryError, StoreUnavailable
from app.routers import (
    categories,
    suppliers,
    products,
)


# LOGGING CONFIGURATION

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s | %(levelname)s | %(message)s",
)

logger = logging.getLogger("app")


# STARTUP

@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.CREATE_TABLES_ON_STARTUP:
        logger.info("Creating tables from model metadata")
        Base.metadata.create_all(bind=engine)
    yield


# APP INIT

app = FastAPI(
    title="Inventory API",
    description="Products, categories and suppliers with referential and soft-delete rules",
    version="1.0.0",
    lifespan=lifespan,
)



# CORS

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type"],
)


# RATE LIMITING

app.state.limiter = limiter
app.add_exception_handler(
    RateLimitExceeded,
    _rate_limit_exceeded_handler
)


# DOMAIN ERRORS

@app.exception_handler(InventoryError)
async def inventory_error_handler(request: Request, exc: InventoryError):
    if isinstance(exc, StoreUnavailable):
        logger.error(f"{request.method} {request.url.path} store unavailable: {exc.cause}")
    else:
        logger.warning(f"{request.method} {request.url.path} {exc.code}: {exc.message}")

    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Rendered in the ValidationFailed shape
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error["loc"][1:]] or [str(error["loc"][0])]
        errors.append({"field": ".".join(location), "reason": error["msg"]})

    return JSONResponse(
        status_code=422,
        content={
            "detail": "Validation failed",
            "error": "validation_failed",
            "errors": errors,
        },
    )


# REQUEST LOGGING MIDDLEWARE

@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()

    response = await call_next(request)

    duration = round((time.time() - start_time) * 1000, 2)

    logger.info(
        f"{request.method} {request.url.path} "
        f"Status: {response.status_code} "
        f"Time: {duration}ms"
    )

    return response


# ROUTERS

app.include_router(categories.router)
app.include_router(suppliers.router)
app.include_router(products.router)



# ROOT

@app.get("/")
def root():
    logger.info("Health check endpoint called")
    return {"message": "Inventory API is running"}
