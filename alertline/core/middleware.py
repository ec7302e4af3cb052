import asyncio
import logging
import time
from typing import Any, Callable, Dict, List

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .failures import HTTP, NOT_FOUND, UNCAUGHT, VALIDATION, Failure


logger = logging.getLogger(__name__)


def _request_id(request: Request) -> str:
    return f"{int(time.time() * 1000)}-{id(request)}"


def failure_from_exception(exc: BaseException) -> Failure:
    """Adapt anything raised inside a request into a Failure."""
    if isinstance(exc, Failure):
        return exc
    if isinstance(exc, StarletteHTTPException):
        kind = NOT_FOUND if exc.status_code == 404 else HTTP
        return Failure.wrap(kind, exc, message=str(exc.detail))
    if isinstance(exc, RequestValidationError):
        return Failure.wrap(VALIDATION, exc, message="Request validation failed")
    return Failure.wrap(UNCAUGHT, exc)


def _diagnostics(failure: Failure) -> Dict[str, Any]:
    return {
        "kind": [kind.name for kind in failure.kind.lineage()],
        "message": failure.message,
        "causes": [f"{type(c).__name__}: {c}" for c in failure.causes()],
    }


def not_found_responder(failure: Failure) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": failure.message or "Not Found"})


def validation_responder(failure: Failure) -> JSONResponse:
    errors: List[Any] = []
    if isinstance(failure.cause, RequestValidationError):
        errors = jsonable_encoder(failure.cause.errors())
    return JSONResponse(status_code=422, content={"detail": errors or failure.message})


def http_exception_responder(failure: Failure) -> JSONResponse:
    cause = failure.cause
    if isinstance(cause, StarletteHTTPException):
        return JSONResponse(
            status_code=cause.status_code,
            content={"detail": cause.detail},
            headers=getattr(cause, "headers", None),
        )
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


class GenericExceptionResponder:
    """Claim every failure it is offered with a 500 response.

    Diagnostic detail is included only when ``debug`` is set; production
    bodies never carry the failure message.
    """

    def __init__(self, debug: bool = False):
        self.debug = debug

    def __call__(self, failure: Failure) -> JSONResponse:
        content: Dict[str, Any] = {"detail": "Internal server error"}
        if self.debug:
            content["error"] = _diagnostics(failure)
        return JSONResponse(status_code=500, content=content)


def unhandled_response(failure: Failure, debug: bool) -> JSONResponse:
    """Terminal fallback used when no handler in the chain claims the failure."""
    content: Dict[str, Any] = {"detail": "Internal server error"}
    if debug:
        content["error"] = _diagnostics(failure)
        content["unhandled"] = True
    return JSONResponse(status_code=500, content=content)


async def log_requests(request: Request, call_next: Callable):
    start_time = time.time()
    request_id = _request_id(request)

    try:
        response = await call_next(request)
        process_time = time.time() - start_time
        # Only log slow requests (>1s) or errors
        if process_time > 1.0 or response.status_code >= 400:
            logger.info(f"[{request_id}] {request.method} {request.url.path} - {response.status_code} - {process_time:.2f}s")
        return response
    except Exception as e:
        process_time = time.time() - start_time
        logger.error(f"[{request_id}] {request.method} {request.url.path} - ERROR: {str(e)} - {process_time:.2f}s")
        raise


async def dispatch_exception(request: Request, exc: Exception):
    """Route a raised exception through the application's dispatch chain.

    Dispatch may block on notification delivery, so it runs in the default
    thread pool.
    """
    request_id = _request_id(request)
    context = request.app.state.context
    failure = failure_from_exception(exc)

    response = await asyncio.to_thread(context.dispatch, failure)
    if response is None:
        logger.error(f"[{request_id}] Unhandled {failure.kind.name} in {request.method} {request.url.path}: {failure.message}")
        response = unhandled_response(failure, debug=context.config.is_development)
    return response


def install_exception_handlers(app: FastAPI) -> None:
    # Failure is registered on its own so it is handled by the exception
    # middleware; the bare Exception handler runs in the server error
    # middleware, which re-raises after responding.
    app.add_exception_handler(Failure, dispatch_exception)
    app.add_exception_handler(Exception, dispatch_exception)
    app.add_exception_handler(StarletteHTTPException, dispatch_exception)
    app.add_exception_handler(RequestValidationError, dispatch_exception)
