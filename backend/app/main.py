import logging.config

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.errors import install_error_handlers
from app.api.metrics import router as metrics_router
from app.api.routes import router as api_router
from app.config import get_settings


def logging_config(level: str) -> dict:
    """``dictConfig`` schema: one stream handler, ``app.*`` loggers at ``level``."""

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {"format": "%(asctime)s %(levelname)s [%(name)s] %(message)s"},
        },
        "handlers": {
            "console": {"class": "logging.StreamHandler", "formatter": "standard"},
        },
        "root": {"handlers": ["console"], "level": "WARNING"},
        "loggers": {
            "app": {"handlers": ["console"], "level": level.upper(), "propagate": False},
            "uvicorn.access": {"level": "INFO"},
        },
    }


settings = get_settings()
logging.config.dictConfig(logging_config(settings.log_level))

app = FastAPI(title=settings.app_name, debug=settings.debug)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[str(origin).rstrip("/") for origin in settings.cors_origins],
    allow_origin_regex=settings.cors_allow_origin_regex,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
install_error_handlers(app)


@app.get("/health", tags=["system"])
def health_check() -> dict[str, str]:
    return {"status": "ok", "environment": settings.environment}


app.include_router(api_router, prefix="/api")
app.include_router(metrics_router)
