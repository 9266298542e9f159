import logging
from contextvars import ContextVar
from time import perf_counter
from uuid import uuid4

from fastapi import FastAPI, Request

from config import logging_config, LoggingConfig

logger = logging.getLogger(__name__)

_request_id: ContextVar[str] = ContextVar("request_id", default="-")


def current_request_id() -> str:
    return _request_id.get()


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = current_request_id()
        return True


def setup_logging(config: LoggingConfig = None):
    config = config or logging_config

    handlers = [logging.StreamHandler()]
    if config.file:
        handlers.append(logging.FileHandler(config.file))

    for handler in handlers:
        handler.addFilter(RequestIdFilter())

    logging.basicConfig(
        level=getattr(logging, config.level, logging.INFO),
        format=config.format,
        handlers=handlers,
        force=True
    )


def register_request_logging(app: FastAPI):
    @app.middleware("http")
    async def request_log_middleware(request: Request, call_next):
        request_id = (request.headers.get("x-request-id") or "").strip() or uuid4().hex
        token = _request_id.set(request_id)
        client = request.client.host if request.client else "-"
        started = perf_counter()

        logger.info(f"Request started method={request.method} url={request.url.path} remote_addr={client}")
        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (perf_counter() - started) * 1000
            logger.exception(f"Request failed method={request.method} url={request.url.path} duration_ms={duration_ms:.2f}")
            _request_id.reset(token)
            raise

        duration_ms = (perf_counter() - started) * 1000
        response.headers["X-Request-Id"] = request_id
        logger.info(
            f"Request completed method={request.method} url={request.url.path} "
            f"remote_addr={client} status={response.status_code} duration_ms={duration_ms:.2f}"
        )
        _request_id.reset(token)
        return response
