"""Logging helpers for the 1Password connector.

Modules log through ``logging.getLogger(__name__)`` and attach structured
fields with ``extra=``. This module turns those records into one line each
(JSON or plain text), keeps CLI output short, and scrubs anything that looks
like a session token, service account token, secret key or password before
it reaches a handler.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional

from .config import ConnectorConfig, LogLevel

SECRET_PATTERNS = [
    r'(?i)\b(?:passw(?:or)?d|pwd|secret|token|api[_-]?key)\s*[:=]\s*["\']?[^"\'\s,]+',
    r'(?i)--session["\']?[\s=,]+["\']?[^\s,\]\'"]+',  # also inside JSON-encoded argv
    r'OP_SESSION_\w+\s*=\s*\S+',
    r'ops_[A-Za-z0-9_\-.]{16,}',  # service account tokens
    r'A3-[A-Z0-9]{6}-[A-Z0-9-]{20,}',  # account secret keys
    r'(?i)\bbearer\s+[A-Za-z0-9._~+/=-]+',
]
_SECRET_RE = [re.compile(p) for p in SECRET_PATTERNS]

_CONTEXT_FIELDS = ("resource_id", "principal_id")

# Attributes every LogRecord carries; anything else came in through extra=.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", *_CONTEXT_FIELDS}


def safe_preview(value: Any, limit: int = 240) -> str:
    """Render ``value`` on a single line of at most ``limit`` characters.

    Containers are JSON-encoded, bytes are decoded leniently and runs of
    whitespace collapse to one space. Truncated output ends with ``…``.
    """
    if value is None:
        return ""
    if isinstance(value, bytes):
        text = value.decode("utf-8", errors="replace")
    elif isinstance(value, (dict, list, tuple)):
        try:
            text = json.dumps(value, default=str, ensure_ascii=False)
        except (TypeError, ValueError):
            text = repr(value)
    else:
        text = str(value)

    text = " ".join(text.split())
    return text if len(text) <= limit else text[: limit - 1] + "…"


def redact_secrets(text: str, replacement: str = "[REDACTED]") -> str:
    """Replace every match of :data:`SECRET_PATTERNS` in ``text``.

    Non-string input is returned as is.
    """
    if not isinstance(text, str):
        return text
    for pattern in _SECRET_RE:
        text = pattern.sub(replacement, text)
    return text


def safe_log_value(value: Any, limit: int = 240, redact: bool = True) -> str:
    """:func:`safe_preview` followed by :func:`redact_secrets`.

    Use this for anything that came from or goes to the ``op`` binary.
    """
    preview = safe_preview(value, limit=limit)
    return redact_secrets(preview) if redact else preview


class ConnectorFormatter(logging.Formatter):
    """One line per record, JSON by default.

    ``resource_id`` and ``principal_id`` are promoted next to the message;
    every other ``extra=`` field is previewed and, unless disabled, redacted.
    """

    def __init__(self, json_format: bool = True, redact_secrets: bool = True, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.json_format = json_format
        self.redact_secrets = redact_secrets

    def _payload(self, record: logging.LogRecord) -> dict[str, Any]:
        message = record.getMessage()
        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": redact_secrets(message) if self.redact_secrets else message,
        }
        for name in _CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value:
                payload[name] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        payload.update(
            (key, safe_log_value(value, redact=self.redact_secrets))
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS
        )
        return payload

    def format(self, record: logging.LogRecord) -> str:
        payload = self._payload(record)
        if self.json_format:
            return json.dumps(payload, default=str, ensure_ascii=False)

        head = [f"[{payload['timestamp']}]", payload["level"], payload["logger"]]
        head.extend(f"{name}={payload[name]}" for name in _CONTEXT_FIELDS if name in payload)
        return " ".join(head) + f" : {payload['message']}"


class ConnectorLoggerAdapter(logging.LoggerAdapter):
    """Adapter stamping ``resource_id`` / ``principal_id`` onto every record.

    Either can be overridden per call::

        log = get_connector_logger(__name__, resource_id=vault_id)
        log.info("granting vault access", principal_id=user_id)
    """

    def __init__(
        self,
        logger: logging.Logger,
        resource_id: Optional[str] = None,
        principal_id: Optional[str] = None,
    ):
        super().__init__(logger, {"resource_id": resource_id, "principal_id": principal_id})

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        for name in _CONTEXT_FIELDS:
            value = kwargs.pop(name, self.extra.get(name))
            if value:
                extra[name] = value
        kwargs["extra"] = extra
        return msg, kwargs


def setup_logging(
    config: Optional[ConnectorConfig] = None,
    json_format: Optional[bool] = None,
    redact_secrets: bool = True,
) -> None:
    """Install a single stderr handler on the root logger.

    Args:
        config: Connector settings; read from the environment when omitted.
        json_format: Overrides ``config.log_json``.
        redact_secrets: Scrub secrets from messages and extra fields.
    """
    if config is None:
        from .config import load_config_from_env

        config = load_config_from_env()

    level = getattr(logging, LogLevel(config.log_level).value)

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(
        ConnectorFormatter(
            json_format=config.log_json if json_format is None else json_format,
            redact_secrets=redact_secrets,
        )
    )

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.setLevel(level)
    root.addHandler(handler)


def get_connector_logger(
    name: str,
    resource_id: Optional[str] = None,
    principal_id: Optional[str] = None,
) -> ConnectorLoggerAdapter:
    """Logger for ``name`` that tags records with the given resource and principal."""
    return ConnectorLoggerAdapter(logging.getLogger(name), resource_id=resource_id, principal_id=principal_id)


__all__ = [
    "SECRET_PATTERNS",
    "ConnectorFormatter",
    "ConnectorLoggerAdapter",
    "get_connector_logger",
    "redact_secrets",
    "safe_log_value",
    "safe_preview",
    "setup_logging",
]
