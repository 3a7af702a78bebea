"""
family_access.audit

Security audit trail package.

Responsibilities:
- Audit record model, credential redaction, sinks, and the non-blocking audit logger.
"""

# Package marker; import from submodules directly.
