"""
family_access.api.routers

HTTP routers.
"""

# Package marker.
