"""
family_access.api

FastAPI adapter package.

Responsibilities:
- App factory, dependencies, routers, and the uvicorn entrypoint.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Routers translate HTTP to engine/administration calls; no decisions are made here.
