"""
spinup.api

API package for the spinup service.

Responsibilities:
- FastAPI app factory and router modules.
- Mapping of provisioning errors onto HTTP responses.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The API layer stays thin: request validation + auth + delegation to services.
