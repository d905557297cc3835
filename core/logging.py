"""
core/logging.py -- Logging setup and credential redaction for StaffDesk.

configure_logging() is called once from api/main.py. It installs the standard
format used across the app and attaches RedactingFilter to every root handler
so that bearer tokens, JWTs, and password fragments never reach a log sink,
even if a caller formats one into a message by mistake.

Layer rule: core/ is the kernel. No imports from api/, auth/, or reporting/.
"""

from __future__ import annotations

import logging
import re

_REDACTED = "***REDACTED***"

_PATTERNS: list[tuple[re.Pattern, str]] = [
    # Authorization: Bearer <token>
    (re.compile(r"(bearer\s+)[A-Za-z0-9_\-\.=]+", re.IGNORECASE), r"\1" + _REDACTED),
    # Bare JWTs (header.payload.signature, base64url segments)
    (re.compile(r"eyJ[A-Za-z0-9_\-]+\.[A-Za-z0-9_\-]+\.[A-Za-z0-9_\-]+"), _REDACTED),
    # password=..., "password": "..."
    (
        re.compile(r"""(["']?password["']?\s*[:=]\s*["']?)[^"'\s,}]+""", re.IGNORECASE),
        r"\1" + _REDACTED,
    ),
]


def redact(message: str) -> str:
    """Return message with every credential-shaped substring masked."""
    for pattern, replacement in _PATTERNS:
        message = pattern.sub(replacement, message)
    return message


class RedactingFilter(logging.Filter):
    """Rewrite the formatted message of each record with credentials masked.

    The record's args are merged into msg first, so values passed as %-style
    arguments are redacted too.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        cleaned = redact(message)
        if cleaned != message:
            record.msg = cleaned
            record.args = None
        return True


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, RedactingFilter) for f in handler.filters):
            handler.addFilter(RedactingFilter())
