"""AdSight — Structured JSON Logging."""

import logging
import json
import sys
from datetime import datetime, timezone
from adsight.config import settings

# Fields callers may pass via ``extra=`` (dataset kind, row counts, model, timing).
EXTRA_FIELDS = ("dataset", "rows", "model", "duration_ms", "status_code", "endpoint")

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """One JSON object per line, with known ``extra`` fields lifted to the top level."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[0] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)
        log_entry.update(
            {key: getattr(record, key) for key in EXTRA_FIELDS if hasattr(record, key)}
        )
        return json.dumps(log_entry, default=str)


def build_formatter(log_format: str) -> logging.Formatter:
    """JSON unless ``text`` is asked for (handy when running locally)."""
    if log_format.lower() == "text":
        return logging.Formatter(TEXT_FORMAT)
    return JSONFormatter()


def get_logger(name: str) -> logging.Logger:
    """Named ``adsight.*`` logger writing to stdout in the configured format."""
    logger = logging.getLogger(f"adsight.{name}")
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(build_formatter(settings.log_format))
        logger.addHandler(handler)
    logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    return logger
