"""
family_access.allowlist.origins

Origin address parsing.

Responsibilities:
- Validate allowlist entries as literal IPv4/IPv6 addresses.
- Normalize addresses to a canonical form so membership is exact equality.
"""

from __future__ import annotations

import ipaddress
from collections.abc import Iterable
from typing import Any

from family_access.errors import ValidationError


def normalize_origin(value: Any) -> str | None:
    """
    Canonical text form of an IP address, or None if `value` is not one.

    Hostnames and CIDR ranges are not origins: membership is per address.
    """

    if not isinstance(value, str):
        return None
    candidate = value.strip()
    if not candidate:
        return None
    try:
        return str(ipaddress.ip_address(candidate))
    except ValueError:
        return None


def validate_origins(origins: Iterable[Any]) -> frozenset[str]:
    if isinstance(origins, str):
        # A bare string would otherwise iterate character by character.
        raise ValidationError("origins must be a collection of addresses", invalid=[origins])
    normalized: set[str] = set()
    invalid: list[str] = []
    for raw in origins:
        origin = normalize_origin(raw)
        if origin is None:
            invalid.append(repr(raw))
        else:
            normalized.add(origin)
    if invalid:
        raise ValidationError(
            f"malformed origin address(es): {', '.join(invalid)}", invalid=invalid
        )
    return frozenset(normalized)
