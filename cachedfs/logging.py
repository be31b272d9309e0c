# cachedfs/logging.py
import logging
import os
import re
from typing import Any, Dict

PII_RE = re.compile(r"([\w\.-]+)@([\w\.-]+)")  # naive email redaction
MAX_LOGGED_CHARS = 200


def configure_logging(level: str | None = None):
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    # basicConfig is a no-op once handlers exist; the level still applies
    logging.getLogger().setLevel(level)


def redact_str(s: str) -> str:
    s = PII_RE.sub("[redacted-email]", s)
    if len(s) > MAX_LOGGED_CHARS:
        return f"<{len(s)} chars>"
    return s


def redact_args(args: Dict[str, Any]) -> Dict[str, Any]:
    safe = dict(args)
    for k, v in list(safe.items()):
        if isinstance(v, str):
            safe[k] = redact_str(v)
        elif isinstance(v, (bytes, bytearray)):
            safe[k] = f"<{len(v)} bytes>"
    return safe


def log_tool_call(logger: logging.Logger, name: str, args: Dict[str, Any]):
    logger.info("tool_call %s %s", name, redact_args(args))
