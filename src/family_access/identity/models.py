"""
family_access.identity.models

Identity domain models.

Responsibilities:
- Define the verified caller identity (`IdentityAssertion`) used within one evaluation.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class IdentityAssertion:
    """
    Verified caller identity. Never persisted beyond the audit record fields.
    """

    subject_id: str
    display_name: str
