"""
Structured logging configuration with trace IDs
"""
import contextvars
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

from bidwell.core.config import Settings

# Context variable to store trace ID across async calls
trace_id_var: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar("trace_id", default=None)

# Fields copied from `extra=` into the JSON record
EXTRA_FIELDS = (
    "user_id",
    "org_id",
    "auction_id",
    "item_id",
    "bid_id",
    "amount",
    "minimum",
    "reason",
    "method",
    "path",
    "status_code",
    "duration_ms",
)

_HANDLER_MARKER = "_bidwell_handler"


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter with trace ID and service info"""

    def __init__(self, *args, service: str = "bidwell", environment: str = "development", **kwargs):
        super().__init__(*args, **kwargs)
        self.service = service
        self.environment = environment

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname

        trace_id = trace_id_var.get()
        if trace_id:
            log_record["trace_id"] = trace_id

        log_record["service"] = self.service
        log_record["environment"] = self.environment

        for field in EXTRA_FIELDS:
            if hasattr(record, field):
                log_record[field] = getattr(record, field)


def setup_logging(settings: Settings) -> logging.Logger:
    """Configure JSON (or plain text) logging on the root logger"""
    if settings.LOG_FORMAT == "text":
        formatter: logging.Formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
    else:
        formatter = CustomJsonFormatter(
            "%(timestamp)s %(level)s %(name)s %(message)s",
            service=settings.APP_NAME.lower(),
            environment=settings.ENVIRONMENT,
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(settings.LOG_LEVEL.upper())

    # Replace handlers installed by a previous call (tests build the app more than once)
    for handler in list(root_logger.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    setattr(console_handler, _HANDLER_MARKER, True)
    root_logger.addHandler(console_handler)

    if settings.LOG_FILE:
        file_handler = logging.FileHandler(settings.LOG_FILE)
        file_handler.setFormatter(formatter)
        setattr(file_handler, _HANDLER_MARKER, True)
        root_logger.addHandler(file_handler)

    # Reduce noise from libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.DB_ECHO else logging.WARNING
    )

    return root_logger


def set_trace_id(trace_id: str) -> contextvars.Token:
    """Set trace ID for current context"""
    return trace_id_var.set(trace_id)


def reset_trace_id(token: contextvars.Token) -> None:
    trace_id_var.reset(token)


def generate_trace_id() -> str:
    """Generate a new trace ID"""
    return str(uuid.uuid4())
