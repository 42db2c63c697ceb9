"""App factory and ASGI entrypoint for the Renewal Prediction API.

- Configures logging and CORS
- Maps prediction service errors to a uniform JSON error payload
- Registers routers for health, feature metadata, and prediction endpoints
- Loads ML models on startup so endpoints are ready to serve
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .core.config import settings
from .core.errors import PredictionServiceError, payload_for
from .core.logging import configure_logging, get_logger
from .routers import health, predict, misc
from .ml.engine import load_models

logger = get_logger(__name__)


def create_app() -> FastAPI:
    configure_logging(settings.log_level, json_logs=settings.log_json)

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        description="Predict plan renewal probability and months to renewal",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(PredictionServiceError)
    async def prediction_error_handler(request: Request, exc: PredictionServiceError):
        logger.warning(
            "Prediction request failed",
            path=request.url.path,
            code=exc.code,
            status_code=exc.status_code,
            reason=str(exc),
        )
        return JSONResponse(status_code=exc.status_code, content=payload_for(exc))

    # Register routers
    app.include_router(health.router)
    app.include_router(misc.router)
    app.include_router(predict.router)

    # Load models at startup
    @app.on_event("startup")
    def _startup_load_models():
        load_models()

    return app


# ASGI entrypoint (uvicorn: `uvicorn alluvia_api.main:app`)
app = create_app()
