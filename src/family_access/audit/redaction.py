"""
family_access.audit.redaction

Helpers that strip bearer credentials out of free text before it is logged or audited.
"""

from __future__ import annotations

import re

REDACTED = "[REDACTED]"

_BEARER_RE = re.compile(r"(?i)\b(bearer)\s+[^\s,;\"']+")


def mask_bearer(text: str) -> str:
    return _BEARER_RE.sub(rf"\1 {REDACTED}", text)


def redact(text: str | None, secret: str | None = None) -> str | None:
    """
    Remove `secret` (the caller's raw credential) and any `Bearer <token>` fragment.
    """

    if text is None:
        return None
    if secret:
        text = text.replace(secret, REDACTED)
    return mask_bearer(text)
