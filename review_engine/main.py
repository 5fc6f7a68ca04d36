import logging
from typing import Optional, TextIO

import structlog
from dotenv import load_dotenv
from fastapi import FastAPI

from review_engine.config import settings
from review_engine.routers.calibration import router as calibration_router
from review_engine.routers.errors import register_exception_handlers
from review_engine.routers.final_scores import router as final_scores_router
from review_engine.routers.health import router as health_router
from review_engine.routers.manager_evaluations import router as manager_evaluations_router
from review_engine.routers.score_adjustments import router as score_adjustments_router

load_dotenv()

logger = logging.getLogger(__name__)


# LOGGING - stdlib records and structlog events share one renderer

SHARED_PROCESSORS = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
]


def build_log_handler(log_format: str, stream: Optional[TextIO] = None) -> logging.Handler:
    """Handler rendering every record as one JSON object or one console line."""
    if log_format == "json":
        renderers = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        renderers = [structlog.dev.ConsoleRenderer(colors=False)]

    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=SHARED_PROCESSORS,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *renderers],
        )
    )
    return handler


def configure_logging(log_format: Optional[str] = None, log_level: Optional[str] = None) -> None:
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *SHARED_PROCESSORS,
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    root = logging.getLogger()
    # Replace a handler installed by an earlier call, keep everything else
    for handler in list(root.handlers):
        if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter):
            root.removeHandler(handler)
    root.addHandler(build_log_handler(log_format or settings.LOG_FORMAT))
    root.setLevel(getattr(logging, log_level or settings.LOG_LEVEL))


# SWAGGER UI - tag display order
_OPENAPI_TAGS = [
    {"name": "Root"},
    {"name": "Health"},
    {"name": "Manager Evaluations"},
    {"name": "Calibration"},
    {"name": "Score Adjustments"},
    {"name": "Final Scores"},
]


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        openapi_tags=_OPENAPI_TAGS,
    )

    # REGISTER EXCEPTION HANDLERS
    register_exception_handlers(app)

    # REGISTER ROUTERS (order matches _OPENAPI_TAGS)
    app.include_router(health_router)
    app.include_router(manager_evaluations_router)
    app.include_router(calibration_router)
    app.include_router(score_adjustments_router)
    app.include_router(final_scores_router)

    @app.get("/", tags=["Root"], summary="Root endpoint")
    async def root():
        return {
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "docs": {
                "swagger": "/docs",
                "redoc": "/redoc"
            },
            "status": "running"
        }

    logger.info(f"{settings.APP_NAME} {settings.APP_VERSION} started ({settings.APP_ENV})")
    return app


app = create_app()


# RUN WITH UVICORN
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "review_engine.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
