import logging
import sys
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from fitcalc.api.routes import bikes, calculator
from fitcalc.config import settings
from fitcalc.core.constants import CalculationKind
from fitcalc.utils.logging import InterceptHandler

INTERCEPTED_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error", "fastapi")


def _skip_health_checks(record) -> bool:
    return "/health" not in record["message"]


def setup_logging():
    logger.remove()
    logger.add(sys.stdout, enqueue=True, backtrace=True, level=settings.log_level, filter=_skip_health_checks)

    logging.getLogger().handlers = [InterceptHandler()]
    for name in INTERCEPTED_LOGGERS:
        stdlib_logger = logging.getLogger(name)
        stdlib_logger.handlers = [InterceptHandler()]
        stdlib_logger.propagate = False


def create_app() -> FastAPI:
    setup_logging()

    _app = FastAPI(title=settings.title, version=settings.version)

    _app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _app.include_router(calculator.router, prefix="/api/calculator", tags=["calculator"])
    _app.include_router(bikes.router, prefix="/api/bikes", tags=["bikes"])

    logger.info("FitCalc API setup complete.")
    return _app


app = create_app()


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    duration = time.time() - start_time

    logger.info(f"{request.method} {request.url.path} Status: {response.status_code} Duration: {duration:.2f}s")
    return response


@app.get("/")
async def root():
    return {"message": settings.title, "version": settings.version}


@app.get("/health", tags=["health"])
async def health_check():
    """
    Report that the API is up and which calculations it serves.
    """
    health_status = {
        "status": "healthy",
        "timestamp": time.time(),
        "calculations": [kind.value for kind in CalculationKind],
    }
    logger.info("Health check complete: {}", health_status)
    return health_status


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("fitcalc.main:app", host="0.0.0.0", port=8000)
