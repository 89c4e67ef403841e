from __future__ import annotations

import json
import logging
from logging.config import dictConfig
from traceback import format_exception

MAX_STACK = 4000


class JsonFormatter(logging.Formatter):
    """Structured JSON formatter for hosted logs."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload: dict[str, object] = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "pid": record.process,
            "message": record.getMessage(),
        }

        if record.exc_info:
            exc_type = record.exc_info[0].__name__ if record.exc_info[0] else None
            stack = "".join(format_exception(*record.exc_info))
            err_obj: dict[str, object] = {"message": str(record.exc_info[1])}
            if exc_type:
                err_obj["type"] = exc_type
            err_obj["stack"] = stack[:MAX_STACK] + ("...(truncated)" if len(stack) > MAX_STACK else "")
            payload["error"] = err_obj

        return json.dumps(payload, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "plain") -> None:
    formatter_name = "json" if fmt == "json" else "plain"

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,  # keep uvicorn loggers
            "formatters": {
                "plain": {
                    "format": "%(asctime)s %(levelname)-5s [pid:%(process)d] %(name)s: %(message)s",
                    "datefmt": "%Y-%m-%dT%H:%M:%S",
                },
                "json": {
                    "()": JsonFormatter,
                    "datefmt": "%Y-%m-%dT%H:%M:%S",
                },
            },
            "handlers": {
                "stream": {
                    "class": "logging.StreamHandler",
                    "level": level.upper(),
                    "formatter": formatter_name,
                }
            },
            "root": {"level": level.upper(), "handlers": ["stream"]},
            "loggers": {
                # the stores' drivers are chatty at DEBUG
                "pymongo": {"level": "WARNING"},
                "botocore": {"level": "WARNING"},
            },
        }
    )
