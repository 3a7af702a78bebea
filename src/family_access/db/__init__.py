"""
family_access.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide ORM models, engine/session setup, and repositories.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The access engine never imports this package directly; it sees only the
# store/sink protocols, so tests can run without a database.
