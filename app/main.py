import logging

from fastapi import FastAPI, HTTPException, status, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import settings

uvicorn_logger = logging.getLogger("uvicorn")

app_logger = logging.getLogger("app")
app_logger.setLevel(settings.LOG_LEVEL.upper())
if uvicorn_logger.handlers:
    app_logger.handlers = uvicorn_logger.handlers
    app_logger.propagate = False

from app.api.customers import router as customers_router
from app.api.addresses import router as addresses_router

logger = logging.getLogger(__name__)
logger.info("Application startup - logging configured")


app = FastAPI(
    title=settings.APP_NAME,
    description="Customer and address records with search and cascading delete",
    version="1.0.0",
    openapi_url="/api/openapi.json",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(customers_router)
app.include_router(addresses_router)


@app.get("/health")
async def health_check():
    return {"status": "ok"}


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc):
    # malformed bodies are a client error like any other missing field
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )
