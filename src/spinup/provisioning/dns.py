"""
spinup.provisioning.dns

Cloudflare DNS client boundary.

Responsibilities:
- Create an "A" record `<tenant>-<service>` pointing at the public host address.
"""

from __future__ import annotations

from typing import Any

import httpx

from spinup.observability.logging import get_logger
from spinup.provisioning.errors import DnsError

log = get_logger(__name__)


class DnsClient:
    def __init__(
        self,
        *,
        http: httpx.AsyncClient,
        api_token: str,
        zone_id: str,
        target_address: str,
    ) -> None:
        self._http = http
        self._api_token = api_token
        self._zone_id = zone_id
        self._target_address = target_address

    @staticmethod
    def record_name(user_id: str, service_name: str) -> str:
        return f"{user_id}-{service_name}"

    async def create_a_record(self, *, user_id: str, service_name: str) -> dict[str, Any]:
        name = self.record_name(user_id, service_name)
        try:
            r = await self._http.post(
                f"/zones/{self._zone_id}/dns_records",
                headers={"Authorization": f"Bearer {self._api_token}"},
                json={"type": "A", "name": name, "content": self._target_address},
            )
            r.raise_for_status()
            body = r.json()
        except (httpx.HTTPError, ValueError) as e:
            raise DnsError(f"creating DNS record {name}: {e}") from e

        if not body.get("success", False):
            raise DnsError(f"creating DNS record {name}: {body.get('errors')}")
        log.info("dns_record_created", record=name)
        return body.get("result", {})

    async def aclose(self) -> None:
        await self._http.aclose()


# --- Module Notes -----------------------------------------------------------
# The client is only constructed when `dns_enabled` is set (see `spinup.context`).
