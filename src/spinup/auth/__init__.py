"""
spinup.auth

Authentication package.

Responsibilities:
- JWT key loading, issuing and validation.
- FastAPI auth dependency (bearer token -> Principal).
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Authorization (tenant matches request) is enforced by the provisioning service,
# not here.
