"""
family_access.identity

Identity verification package.

Responsibilities:
- Verify bearer credentials against an identity provider (HTTP) or locally (JWT).
- Turn a valid credential into an `IdentityAssertion`.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Verifiers never retry; retry policy belongs to whoever owns the decision.
