from fastapi import Request
import logging
import uuid
from typing import Any, Optional

from rich.logging import RichHandler

from ytmp4.config.settings import config

logger = logging.getLogger(__name__)


class RequestIdFilter(logging.Filter):
    """Make sure every record can be rendered with %(request_id)s"""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = "-"
        return True


_handler: Optional[logging.Handler] = None


def setup_logging() -> None:
    """Install the root handler according to config.logging"""
    global _handler

    if config.logging.enable_rich:
        handler: logging.Handler = RichHandler(rich_tracebacks=True, show_path=False)
        handler.setFormatter(logging.Formatter(config.logging.format))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s " + config.logging.format)
        )
    handler.addFilter(RequestIdFilter())

    root = logging.getLogger()
    # Called again on app reload
    if _handler is not None:
        root.removeHandler(_handler)
    root.addHandler(handler)
    root.setLevel(config.logging.level)
    _handler = handler


async def bind_request_id(request: Request) -> str:
    """Router dependency assigning a short id used to correlate log lines"""
    request_id = uuid.uuid4().hex[:8]
    request.state.request_id = request_id
    return request_id


def log_with_context(
    request: Request,
    level: int,
    message: str,
    **kwargs: Any
) -> None:
    """
    Log with request context.
    Automatically includes request_id for tracing.
    """
    extra = {
        "request_id": getattr(request.state, "request_id", "unknown"),
        **kwargs
    }
    logger.log(level, message, extra=extra)

def log_info(request: Request, message: str, **kwargs: Any) -> None:
    log_with_context(request, logging.INFO, message, **kwargs)

def log_error(request: Request, message: str, **kwargs: Any) -> None:
    log_with_context(request, logging.ERROR, message, **kwargs)

def log_warning(request: Request, message: str, **kwargs: Any) -> None:
    log_with_context(request, logging.WARNING, message, **kwargs)
