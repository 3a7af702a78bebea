"""
family_access.admin

Allowlist administration package.

Responsibilities:
- Privileged allowlist read/replace/add/remove gated by the decision engine.
- One-time trusted bootstrap at provisioning time.
"""

# Package marker.
