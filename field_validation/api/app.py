from __future__ import annotations

import logging
import sys
import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from omegaconf import DictConfig

from field_validation.config import Settings, get_settings
from field_validation.core import (
    FieldValidationPipeline,
    ResourceLoadError,
    TextModelClient,
)
from field_validation.llm import CLIENT_REGISTRY
from field_validation.models import ErrorResponse

logger = logging.getLogger(__name__)

NON_OBJECT_BODY_MESSAGE = "Request body must be a JSON object"


def _configure_logging() -> None:
    logging.basicConfig(
        stream=sys.stdout,
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s %(message)s",
    )


def _build_model_client(full_cfg: DictConfig, settings: Settings | None = None) -> TextModelClient:
    """
    Instantiate the model client named by full_cfg.model._target_.

    The target is checked against CLIENT_REGISTRY before anything is
    imported. An unknown or missing _target_ raises ResourceLoadError
    immediately. `settings` is handed to the client constructor so the
    client reads the same Settings as the app; None means get_settings().
    """
    from hydra.errors import InstantiationException  # noqa: PLC0415
    from hydra.utils import instantiate  # noqa: PLC0415

    model_cfg = full_cfg.get("model")
    target = model_cfg.get("_target_") if model_cfg else None
    if target not in CLIENT_REGISTRY:
        raise ResourceLoadError(
            f"Unknown model client in config: {target!r}. "
            f"Valid clients are: {sorted(CLIENT_REGISTRY)}"
        )

    # Hydra resolves the target and config kwargs; the constructor runs here
    # so Settings travels as a plain object, outside OmegaConf.
    try:
        factory = instantiate(model_cfg, _partial_=True)
    except InstantiationException as exc:
        cause = exc.__cause__ or exc
        raise ResourceLoadError(f"Failed to instantiate model client '{target}'", cause) from exc

    try:
        client = factory(settings=settings)
    except ResourceLoadError:
        raise
    except Exception as exc:
        raise ResourceLoadError(f"Failed to instantiate model client '{target}'", exc) from exc

    logger.info("Model client loaded: %s", client.name)
    return client


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Startup order:
      1. Configure logging
      2. Read the Hydra config stored on app.state at creation
      3. Build the model client and the pipeline around it

    ResourceLoadError at any step → log + re-raise → service does NOT start.
    """
    _configure_logging()
    full_cfg: DictConfig = app.state.app_cfg

    logger.info("Field validation service starting…")
    try:
        client = _build_model_client(full_cfg, settings=app.state.settings)
        app.state.validation_pipeline = FieldValidationPipeline(client=client)
        logger.info("Pipeline ready with model '%s'. Accepting requests.", client.name)
    except ResourceLoadError as exc:
        logger.critical(
            "FATAL: Could not initialize validation pipeline: %s. Service will not start.", exc
        )
        raise

    yield

    logger.info("Field validation service shutting down.")


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """400 instead of FastAPI's 422; non-object bodies get the fixed message."""
    if not isinstance(exc.body, dict):
        body = ErrorResponse(error=NON_OBJECT_BODY_MESSAGE)
    else:
        body = ErrorResponse(error="Invalid request", details=jsonable_encoder(exc.errors()))
    return JSONResponse(status_code=400, content=body.model_dump(exclude_none=True))


def create_app(
        app_cfg: DictConfig | None = None,
        settings: Settings | None = None,
) -> FastAPI:
    """
    App factory.

    Args:
        app_cfg:  Hydra DictConfig holding a `model` node. In production this
                  comes from @hydra.main(); in tests it is built directly
                  with OmegaConf.create({...}).
        settings: Optional Settings override. Used in tests to inject a
                  Settings instance without reading .env.
    """
    settings = settings if settings is not None else get_settings()

    app = FastAPI(
        title="Field Validation Assistant",
        version="0.1.0",
        description=(
            "Contextual tooltip and example for email and Kenyan phone number "
            "fields, produced by a generative model and decoded into a fixed shape."
        ),
        lifespan=_lifespan,
    )

    # OmegaConf.create({}) gives an empty fallback; lifespan will raise
    # ResourceLoadError because no model client is configured.
    from omegaconf import OmegaConf  # noqa: PLC0415

    app.state.app_cfg = app_cfg if app_cfg is not None else OmegaConf.create({"model": {}})
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.middleware("http")
    async def add_correlation_id(request: Request, call_next):
        correlation_id = request.headers.get("X-Correlation-ID", str(uuid.uuid4()))
        request.state.correlation_id = correlation_id
        response = await call_next(request)
        response.headers["X-Correlation-ID"] = correlation_id
        return response

    app.add_exception_handler(RequestValidationError, _request_validation_handler)

    from field_validation.api.router import router  # noqa: PLC0415
    app.include_router(router)

    if settings.inspect_mode:
        from field_validation.api.inspect_router import inspect_router  # noqa: PLC0415
        app.include_router(inspect_router)
        logger.warning("Inspect mode enabled — /v1/inspect exposes prompts and raw model output.")

    return app
