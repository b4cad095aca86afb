"""Scope-aware port windows for concurrently running test processes.

Every topology that needs real sockets owns a window of 100 consecutive
ports starting at::

    30000 + 1000 * (process_id % 60) + 100 * scope_slot(scope)

No lock files and no shared allocator are involved. Correctness rests on two
usage preconditions that are documented here and never checked at runtime:

* concurrently running test processes have distinct process ids (mod 60);
* SUITE and TEST topologies inside one process never run at the same time,
  so their randomly drawn slots (1-9) may be reused. The single GLOBAL
  topology of a process is pinned to slot 0 and never collides with them.
"""

from __future__ import annotations

import os
import zlib
from dataclasses import dataclass

from loguru import logger

from clustertopo.datastructures.type_aliases import (
    NodeOrdinal,
    PortNumber,
    ProcessId,
    ScopeSlot,
)

from .config import get_random_source, get_topology_settings
from .errors import TopologyPreconditionError
from .model import Scope
from .random_source import RandomSource

BASE_PORT = 30000
PORTS_PER_PROCESS = 1000
MAX_PROCESS_SLOTS = 60
PORTS_PER_SCOPE = 100
GLOBAL_SCOPE_SLOT = 0
MIN_SCOPE_SLOT = 1
MAX_SCOPE_SLOT = 9


@dataclass(frozen=True, slots=True)
class PortWindow:
    """Reserved run of consecutive ports owned by one topology."""

    start: PortNumber
    size: int = PORTS_PER_SCOPE

    @property
    def end(self) -> PortNumber:
        """Last port of the window, inclusive."""
        return self.start + self.size - 1

    def contains(self, port: PortNumber) -> bool:
        return self.start <= port <= self.end

    def port_for(self, ordinal: NodeOrdinal) -> PortNumber:
        if not 0 <= ordinal < self.size:
            raise TopologyPreconditionError(
                f"Ordinal {ordinal} does not fit port window "
                f"{self.start}-{self.end}"
            )
        return self.start + ordinal


def scope_slot(scope: Scope, rng: RandomSource | None = None) -> ScopeSlot:
    """Pick the hundred-port slot for a topology of the given scope."""
    if scope is Scope.GLOBAL:
        return GLOBAL_SCOPE_SLOT
    rng = rng if rng is not None else get_random_source()
    slot = rng.randint(MIN_SCOPE_SLOT, MAX_SCOPE_SLOT)
    port_log.debug("Drew port slot {} for {} topology", slot, scope.value)
    return slot


def base_port(
    scope: Scope, process_id: ProcessId, rng: RandomSource | None = None
) -> PortNumber:
    """Compute the first port of a topology's window.

    GLOBAL topologies always get the same port for a given process id; SUITE
    and TEST topologies draw a new slot on every call.
    """
    if process_id < 0:
        raise TopologyPreconditionError(
            f"Process id must be non-negative, got {process_id}"
        )
    return (
        BASE_PORT
        + PORTS_PER_PROCESS * (process_id % MAX_PROCESS_SLOTS)
        + PORTS_PER_SCOPE * scope_slot(scope, rng)
    )


def get_worker_id() -> str:
    """Get the pytest-xdist worker id or default to 'master'."""
    worker_id = os.environ.get("PYTEST_XDIST_WORKER", "master")
    if worker_id == "master":
        for env_var in os.environ:
            if env_var.startswith("PYTEST_XDIST_WORKER_"):
                worker_id = os.environ[env_var]
                break
    return worker_id


def process_id_from_worker(worker_id: str) -> ProcessId:
    """Map a worker id to a process id: master -> 0, gwN -> N + 1."""
    if worker_id == "master":
        return 0
    if worker_id.startswith("gw") and worker_id[2:].isdigit():
        return int(worker_id[2:]) + 1
    # crc32 is stable across interpreter runs, unlike hash()
    return zlib.crc32(worker_id.encode()) % 1000 + 1


def resolve_process_id(configured: ProcessId | None = None) -> ProcessId:
    """Resolve the process id from an argument, settings or the xdist worker."""
    if configured is None:
        configured = get_topology_settings().process_id
    if configured is not None:
        if configured < 0:
            raise TopologyPreconditionError(
                f"Process id must be non-negative, got {configured}"
            )
        return configured
    return process_id_from_worker(get_worker_id())


class ScopedPortAllocator:
    """Hands out port windows for the topologies of one test process."""

    def __init__(
        self, process_id: ProcessId | None = None, rng: RandomSource | None = None
    ) -> None:
        self.worker_id = get_worker_id()
        self.process_id = resolve_process_id(process_id)
        self._rng = rng

    def base_port(self, scope: Scope) -> PortNumber:
        return base_port(scope, self.process_id, self._rng)

    def allocate_window(self, scope: Scope) -> PortWindow:
        window = PortWindow(start=self.base_port(scope))
        port_log.debug(
            "Process {} ({}) reserved ports {}-{} for {} topology",
            self.process_id,
            self.worker_id,
            window.start,
            window.end,
            scope.value,
        )
        return window

    def get_worker_info(self) -> dict:
        """Return process metadata and the port range this process may use."""
        process_start = BASE_PORT + PORTS_PER_PROCESS * (
            self.process_id % MAX_PROCESS_SLOTS
        )
        return {
            "worker_id": self.worker_id,
            "process_id": self.process_id,
            "process_range": {
                "start": process_start,
                "end": process_start + PORTS_PER_PROCESS - 1,
            },
            "global_window": process_start + PORTS_PER_SCOPE * GLOBAL_SCOPE_SLOT,
            "transient_slots": list(range(MIN_SCOPE_SLOT, MAX_SCOPE_SLOT + 1)),
        }


port_log = logger
