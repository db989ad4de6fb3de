"""
JSON logs for the paywall API.
request_id берётся из contextvar, который выставляет HTTP-middleware, поэтому
его видят все записи запроса, а не только http_request.
"""
import json
import logging
from contextvars import ContextVar
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler

from x402gate.core.config import Settings


request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)


class RequestContextFilter(logging.Filter):
    """Проставляет record.request_id из контекста, если вызывающий не передал свой."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "request_id", None) is None:
            record.request_id = request_id_var.get()
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per line; only whitelisted record attributes are emitted."""

    EXTRA_FIELDS = (
        "request_id", "path", "method", "status_code", "latency_ms",
        "payment_id", "payment_ref", "tx_hash", "outcome", "network",
        "facilitator_method", "error", "breaker_name", "old_state", "new_state",
        "backend",
    )

    def __init__(self, extra_fields: tuple[str, ...] | None = None) -> None:
        super().__init__()
        self.extra_fields = extra_fields or self.EXTRA_FIELDS

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extras = {field: getattr(record, field, None) for field in self.extra_fields}
        payload.update({field: value for field, value in extras.items() if value is not None})
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def build_handlers(settings: Settings) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if settings.log_file:
        handlers.append(
            RotatingFileHandler(
                settings.log_file,
                maxBytes=settings.log_max_bytes,
                backupCount=settings.log_backup_count,
            )
        )
    formatter = JsonFormatter()
    context_filter = RequestContextFilter()
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(context_filter)
    return handlers


def configure_logging(settings: Settings) -> None:
    """Заменяет обработчики root-логгера; безопасно вызывать повторно (каждый create_app)."""
    root = logging.getLogger()
    root.handlers = build_handlers(settings)
    root.setLevel(settings.log_level)
