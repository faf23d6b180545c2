"""
proforma_backup.api

API package for the proforma backup service.

Responsibilities:
- FastAPI app factory and router modules.
- API-layer dependency wiring and request plumbing.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The API layer stays thin: readiness gating + body parsing + delegation to services.
