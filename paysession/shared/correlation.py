"""Per-request correlation ids, carried through logs."""

import logging
import uuid
from contextvars import ContextVar, Token

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")


def generate_correlation_id() -> str:
    return f"req_{uuid.uuid4().hex[:16]}"


def get_correlation_id() -> str:
    return correlation_id_var.get()


def set_correlation_id(cid: str) -> Token:
    return correlation_id_var.set(cid)


def reset_correlation_id(token: Token) -> None:
    correlation_id_var.reset(token)


class CorrelationIdFilter(logging.Filter):
    """Stamp every log record with the current correlation id ("-" outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id_var.get() or "-"
        return True


LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s [%(correlation_id)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    # basicConfig is a no-op once the root logger has handlers; the package
    # logger level still applies.
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("paysession").setLevel(level)
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, CorrelationIdFilter) for f in handler.filters):
            handler.addFilter(CorrelationIdFilter())
