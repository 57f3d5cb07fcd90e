"""
Logging setup for the connector, plain text or JSON lines.
"""
import logging
import sys
import json
import os
from datetime import datetime, timezone
from typing import Any, Dict

# Attributes copied from LogRecord extras into the JSON payload
EXTRA_FIELDS = (
    "request_id",
    "path",
    "status",
    "duration_ms",
    "workspace_id",
    "form_id",
    "integration_id",
)


class JSONFormatter(logging.Formatter):
    """Render each record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj: Dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
            "service": "opnform-connector",
        }

        for field in EXTRA_FIELDS:
            if hasattr(record, field):
                log_obj[field] = getattr(record, field)

        if record.exc_info:
            log_obj["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(log_obj, default=str)


def configure_logging(level: int = logging.INFO) -> None:
    """
    Install a stdout handler on the root logger.
    LOG_JSON=true switches to JSONFormatter.
    """
    use_json = os.getenv("LOG_JSON", "").lower() in ("true", "1", "yes")

    handler = logging.StreamHandler(sys.stdout)

    if use_json:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )

    logging.basicConfig(
        level=level,
        handlers=[handler],
    )
