"""
spinup.auth.models

Auth domain models.

Responsibilities:
- Define the authenticated identity type (`Principal`) injected into endpoints.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated caller identity. `subject` is the tenant id.
    """

    subject: str


# --- Module Notes -----------------------------------------------------------
# Keep this model minimal; it crosses the API and service layers.
