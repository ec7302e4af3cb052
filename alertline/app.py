import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import List, Optional

from fastapi import Depends, FastAPI

from .core.config import Config
from .core.context import AlertContext, Responder, build_context, get_context
from .core.dispatch import any_kind, kind_is
from .core.failures import HTTP, NOT_FOUND, VALIDATION
from .core.middleware import (
    GenericExceptionResponder,
    http_exception_responder,
    install_exception_handlers,
    log_requests,
    not_found_responder,
    validation_responder,
)

logger = logging.getLogger(__name__)


def default_responders(config: Config) -> List[Responder]:
    """Response-producing handlers for the web layer, most specific first."""
    return [
        (kind_is(NOT_FOUND), not_found_responder),
        (kind_is(HTTP), http_exception_responder),
        (kind_is(VALIDATION), validation_responder),
        (any_kind, GenericExceptionResponder(debug=config.is_development)),
    ]


def create_app(context: Optional[AlertContext] = None) -> FastAPI:
    """Build the FastAPI application.

    When no context is passed, one is built from the environment at startup
    and released at shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if context is not None:
            app.state.context = context
        else:
            config = Config()
            app.state.context = build_context(config, responders=default_responders(config))
        chain = app.state.context.chain
        logger.info(f"Dispatch chain ready: {[entry.label for entry in chain.entries]}")
        yield
        del app.state.context
        logger.info("Dispatch context released")

    app = FastAPI(title="Alertline", lifespan=lifespan)

    @app.middleware("http")
    async def _log_requests(request, call_next):
        return await log_requests(request, call_next)

    install_exception_handlers(app)

    @app.get("/health")
    async def health_check(ctx: AlertContext = Depends(get_context)):
        """Report the notifier and dispatch chain built at startup.

        Configuration is validated when the context is built, so a running
        app is always configured.
        """
        return {
            "status": "healthy",
            "service": ctx.config.APP_NAME,
            "notifier": type(ctx.notifier).__name__,
            "alerts_enabled": ctx.config.ALERTS_ENABLED,
            "handlers": [entry.label for entry in ctx.chain.entries],
            "timestamp": datetime.now().isoformat(),
        }

    @app.get("/")
    async def root():
        """Return basic API information."""
        return {
            "service": "Alertline",
            "version": "1.0",
            "endpoints": {
                "health": "/health",
            },
            "timestamp": datetime.now().isoformat(),
            "description": "Routes application failures through a handler chain and alerts operators",
        }

    return app


app = create_app()
