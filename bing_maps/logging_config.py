from contextvars import ContextVar
import logging
import logging.config
import uuid
from contextlib import contextmanager
from typing import Iterator, Optional

from bing_maps.config import settings


# Create correlation ID contextvar
correlation_id_contextvar: ContextVar[str] = ContextVar("correlation_id")


class CorrelationFormatter(logging.Formatter):
    """Formatter for records that never passed through a CorrelationFilter."""

    def __init__(
        self,
        fmt: Optional[str] = None,
        datefmt: Optional[str] = None,
        default_id: str = "system",
    ):
        super().__init__(fmt, datefmt)
        self.default_id = default_id

    def format(self, record: logging.LogRecord) -> str:
        record.__dict__.setdefault("correlation_id", self.default_id)
        return super().format(record)


class CorrelationFilter(logging.Filter):
    """Stamps each record with the route request ID active when it was logged."""

    def __init__(self, contextvar: ContextVar[str], default_id: str = "system"):
        super().__init__()
        self.contextvar = contextvar
        self.default_id = default_id

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = self.contextvar.get(self.default_id)
        return True


@contextmanager
def correlation_scope(correlation_id: str | None = None) -> Iterator[str]:
    """Tag every log record emitted inside the block with one route request ID."""
    if not correlation_id:
        correlation_id = str(uuid.uuid4())

    token = correlation_id_contextvar.set(correlation_id)
    try:
        yield correlation_id
    finally:
        correlation_id_contextvar.reset(token)


def configure_logging(level: Optional[str] = None) -> None:
    """Route all logs through one console handler stamped with correlation IDs."""
    level = (level or settings.log_level).upper()

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {
                    "()": CorrelationFormatter,
                    "fmt": "%(asctime)s - %(correlation_id)s - %(levelname)s - %(message)s",
                }
            },
            "filters": {
                "correlation": {
                    "()": CorrelationFilter,
                    "contextvar": correlation_id_contextvar,
                }
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "standard",
                    "filters": ["correlation"],
                }
            },
            "root": {"level": level, "handlers": ["console"]},
            "loggers": {
                # Ensure specific loggers also get the correlation filter
                "httpx": {
                    "level": level,
                    "filters": ["correlation"],
                    "propagate": True,
                },
                "bing_maps": {
                    "level": level,
                    "filters": ["correlation"],
                    "propagate": True,
                },
            },
        }
    )
