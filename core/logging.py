import json
import logging
import sys
import time

# Structured fields copied from `extra` onto the JSON line
EXTRA_FIELDS = (
    "trace_id",
    "endpoint",
    "video_id",
    "window",
    "effective_window",
    "widened",
    "sort",
    "shorts",
    "total",
    "returned",
    "latency_ms",
    "error_code",
    "error_type",
)


class JsonFormatter(logging.Formatter):
    """JSON line formatter for structured logging"""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON line"""
        base = {
            "ts": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime(record.created)),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }

        for field in EXTRA_FIELDS:
            if hasattr(record, field):
                base[field] = getattr(record, field)

        if record.exc_info:
            base["exception"] = self.formatException(record.exc_info)

        return json.dumps(base, ensure_ascii=False, default=str)


def setup_json_logging(level: int | str = logging.INFO) -> None:
    """Setup JSON line logging for the application"""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())

    if isinstance(level, str):
        level = level.strip().upper()

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(level)

    logging.info("JSON logging initialized", extra={"trace_id": "system_init"})
