"""
family_access.access

Access decision package.

Responsibilities:
- Decision domain types (request, decision, reason codes).
- The dual-factor decision engine.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# `authorized=True` is produced in exactly one place: `AccessDecisionEngine._decide`.
