"""
spinup.services

Service-layer package.

Responsibilities:
- Sequence the provisioning collaborators into one request workflow.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services depend only on the ProvisioningContext, so tests swap in fake engines
# and probes without touching the HTTP layer.
