"""
tests.test_ports

Port allocation: real-socket probing and the in-process reservation table.
"""

from __future__ import annotations

import asyncio
import socket

import pytest
from conftest import FakeProbe

from spinup.provisioning.errors import ResourceExhausted
from spinup.provisioning.ports import (
    PortAllocator,
    PortReservations,
    ProbeResult,
    tcp_probe,
)


def _allocator(start: int, end: int, probe, *, ttl: float = 300.0) -> PortAllocator:
    return PortAllocator(
        start=start, end=end, reservations=PortReservations(ttl=ttl), probe=probe
    )


@pytest.mark.asyncio
async def test_bound_port_is_never_returned() -> None:
    listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    listener.bind(("127.0.0.1", 0))
    listener.listen()
    port = listener.getsockname()[1]
    try:
        alloc = _allocator(port, port + 1, tcp_probe(timeout=1.0))
        with pytest.raises(ResourceExhausted):
            await alloc.allocate()
    finally:
        listener.close()


@pytest.mark.asyncio
async def test_refused_port_is_returned() -> None:
    s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    s.bind(("127.0.0.1", 0))
    port = s.getsockname()[1]
    s.close()

    alloc = _allocator(port, port + 1, tcp_probe(timeout=1.0))
    assert await alloc.allocate() == port
    assert alloc.reservations.reserved_ports() == [port]


@pytest.mark.asyncio
async def test_scan_skips_listening_and_unreachable_ports() -> None:
    probe = FakeProbe({5432: ProbeResult.LISTENING, 5433: ProbeResult.UNREACHABLE})
    alloc = _allocator(5432, 5440, probe)

    assert await alloc.allocate() == 5434
    assert probe.probed == [5432, 5433, 5434]


@pytest.mark.asyncio
async def test_all_ports_occupied_raises_resource_exhausted() -> None:
    probe = FakeProbe({p: ProbeResult.LISTENING for p in range(5432, 5440)})
    alloc = _allocator(5432, 5440, probe)

    with pytest.raises(ResourceExhausted):
        await alloc.allocate()
    assert probe.probed == list(range(5432, 5440))


@pytest.mark.asyncio
async def test_concurrent_allocations_get_distinct_ports() -> None:
    async def slow_refused(port: int) -> ProbeResult:
        await asyncio.sleep(0.01)
        return ProbeResult.REFUSED

    alloc = _allocator(5432, 5440, slow_refused)
    ports = await asyncio.gather(*(alloc.allocate() for _ in range(4)))

    assert len(set(ports)) == 4
    assert sorted(ports) == alloc.reservations.reserved_ports()


@pytest.mark.asyncio
async def test_reserved_port_is_skipped_until_released() -> None:
    probe = FakeProbe()
    alloc = _allocator(5432, 5434, probe)

    first = await alloc.allocate()
    second = await alloc.allocate()
    assert (first, second) == (5432, 5433)
    with pytest.raises(ResourceExhausted):
        await alloc.allocate()

    alloc.release(first)
    assert await alloc.allocate() == 5432


def test_reservation_expires() -> None:
    now = [100.0]
    table = PortReservations(ttl=10.0, clock=lambda: now[0])

    assert table.try_reserve(5432)
    assert not table.try_reserve(5432)
    now[0] = 110.0
    assert not table.is_reserved(5432)
    assert table.try_reserve(5432)
    assert table.reserved_ports() == [5432]
