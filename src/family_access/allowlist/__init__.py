"""
family_access.allowlist

Origin allowlist package.

Responsibilities:
- Origin address validation/normalization.
- Allowlist store protocol with in-memory and SQL implementations.
"""

# Package marker.
