"""
spinup.provisioning.ports

Port allocation for provisioned databases.

Responsibilities:
- Probe a fixed, contiguous loopback port range for a port nobody listens on.
- Hold an in-process reservation table so concurrent requests never receive
  the same port between the probe and the container launch.
"""

from __future__ import annotations

import asyncio
import threading
import time
from collections.abc import Awaitable, Callable
from enum import Enum

from spinup.observability.logging import get_logger
from spinup.provisioning.errors import ResourceExhausted

log = get_logger(__name__)

LOOPBACK = "127.0.0.1"


class ProbeResult(Enum):
    REFUSED = "refused"
    LISTENING = "listening"
    UNREACHABLE = "unreachable"


PortProbe = Callable[[int], Awaitable[ProbeResult]]


def tcp_probe(*, host: str = LOOPBACK, timeout: float = 3.0) -> PortProbe:
    async def probe(port: int) -> ProbeResult:
        try:
            _, writer = await asyncio.wait_for(asyncio.open_connection(host, port), timeout)
        except ConnectionRefusedError:
            return ProbeResult.REFUSED
        except (OSError, TimeoutError) as e:
            log.info("port_probe_error", port=port, error=str(e) or type(e).__name__)
            return ProbeResult.UNREACHABLE
        writer.close()
        try:
            await writer.wait_closed()
        except OSError:
            pass
        return ProbeResult.LISTENING

    return probe


class PortReservations:
    """
    Table of port -> reserved-until (monotonic seconds) guarded by a mutex.
    Expired entries no longer block a port.
    """

    def __init__(
        self, *, ttl: float, clock: Callable[[], float] = time.monotonic
    ) -> None:
        self._ttl = ttl
        self._clock = clock
        self._lock = threading.Lock()
        self._reserved: dict[int, float] = {}

    def is_reserved(self, port: int) -> bool:
        with self._lock:
            return self._active(port)

    def try_reserve(self, port: int) -> bool:
        with self._lock:
            if self._active(port):
                return False
            self._reserved[port] = self._clock() + self._ttl
            return True

    def release(self, port: int) -> None:
        with self._lock:
            self._reserved.pop(port, None)

    def reserved_ports(self) -> list[int]:
        with self._lock:
            return sorted(p for p in list(self._reserved) if self._active(p))

    def _active(self, port: int) -> bool:
        until = self._reserved.get(port)
        if until is None:
            return False
        if until <= self._clock():
            del self._reserved[port]
            return False
        return True


class PortAllocator:
    def __init__(
        self,
        *,
        start: int,
        end: int,
        reservations: PortReservations,
        probe: PortProbe,
    ) -> None:
        self._range = range(start, end)
        self._reservations = reservations
        self._probe = probe

    @property
    def reservations(self) -> PortReservations:
        return self._reservations

    async def allocate(self) -> int:
        # A refused connection means nothing listens there; it is not a host-wide lock,
        # so the candidate only counts once it is also reserved in-process.
        for port in self._range:
            if self._reservations.is_reserved(port):
                continue
            result = await self._probe(port)
            if result is not ProbeResult.REFUSED:
                continue
            if self._reservations.try_reserve(port):
                log.info("port_allocated", port=port)
                return port

        log.warning("ports_exhausted", start=self._range.start, end=self._range.stop)
        raise ResourceExhausted(
            f"all allocated ports are occupied in [{self._range.start}, {self._range.stop})"
        )

    def release(self, port: int) -> None:
        self._reservations.release(port)


# --- Module Notes -----------------------------------------------------------
# Reservations are released by the provisioning service once the launch step has
# finished, whatever its outcome; the TTL only covers a crashed request path.
