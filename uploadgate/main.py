import logging

from fastapi import FastAPI
from fastapi import Request
from fastapi import status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from uploadgate.api.routes import router
from uploadgate.core.config import settings
from uploadgate.core.exceptions import UploadGateError
from uploadgate.core.logging import setup_logging

setup_logging()

app = FastAPI(title="Upload Gate")

logger = logging.getLogger(__name__)


@app.on_event("startup")
async def startup_event() -> None:
    logger.info("Application startup - upload policy service started")


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.error(f"HTTP exception: {exc.detail} (status: {exc.status_code})")
    return JSONResponse({"detail": exc.detail}, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.error("Request validation failed: %s", exc.errors(), exc_info=False)
    return JSONResponse(
        {"error": "Input validation failed", "details": jsonable_errors(exc)},
        status_code=422,
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, object]]:
    # ctx may hold exception instances, which JSON cannot carry
    return [{key: value for key, value in error.items() if key != "ctx"} for error in exc.errors()]


@app.exception_handler(UploadGateError)
async def upload_gate_exception_handler(_request: Request, exc: UploadGateError) -> JSONResponse:
    logger.error(f"Upload policy error: {str(exc)}")
    return JSONResponse({"error": str(exc)}, status_code=500)


@app.get("/health", status_code=status.HTTP_200_OK, tags=["Health"])
async def health_check() -> dict[str, str]:
    logger.info("Health check endpoint called")
    return {"status": "ok"}


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_methods=["POST", "GET", "OPTIONS"],
    allow_headers=["*"],
)
app.include_router(router)
