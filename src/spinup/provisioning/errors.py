"""
spinup.provisioning.errors

Error taxonomy for the provisioning workflow.

Every class carries the HTTP status the API layer answers with, so the
exception handler in `api.app` needs no per-class mapping.
"""

from __future__ import annotations

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_507_INSUFFICIENT_STORAGE,
)


class ProvisioningError(Exception):
    status_code: int = HTTP_500_INTERNAL_SERVER_ERROR
    public_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.public_message)
        self.message = message or self.public_message

    @property
    def detail(self) -> str:
        # Client errors explain themselves; server-side detail stays in the logs.
        if self.status_code < HTTP_500_INTERNAL_SERVER_ERROR:
            return self.message
        return self.public_message


class AuthorizationError(ProvisioningError):
    status_code = HTTP_401_UNAUTHORIZED
    public_message = "userid doesn't match"


class ValidationError(ProvisioningError):
    status_code = HTTP_400_BAD_REQUEST
    public_message = "invalid request"


class ResourceExhausted(ProvisioningError):
    status_code = HTTP_507_INSUFFICIENT_STORAGE
    public_message = "all allocated ports are occupied"


class RenderError(ProvisioningError):
    public_message = "Error preparing service"


class PreflightError(ProvisioningError):
    public_message = "Error starting service: container engine unavailable"


class ComposeValidationError(ProvisioningError):
    public_message = "Error starting service: invalid compose file"


class LaunchError(ProvisioningError):
    public_message = "Error starting service"

    def __init__(self, message: str | None = None, *, stderr: str = "") -> None:
        super().__init__(message)
        self.stderr = stderr


class IdentifierLookupError(ProvisioningError):
    public_message = "Error getting container id"


class PersistError(ProvisioningError):
    public_message = "Error recording cluster metadata"


class DnsError(ProvisioningError):
    public_message = "Error connecting service"


# --- Module Notes -----------------------------------------------------------
# `message` carries internal detail (stderr, paths) for logs; 5xx responses only
# expose `public_message`.
