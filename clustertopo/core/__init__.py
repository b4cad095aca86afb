"""
clustertopo core module.

Scope-aware port windows, seed selection and the topology configurator that
composes them into per-node settings.
"""

from .config import (
    TopologySettings,
    get_random_source,
    get_topology_settings,
    reset_topology_settings,
)
from .errors import TopologyError, TopologyPreconditionError
from .logging import configure_logging
from .model import NodeIdentity, Scope, TransportMode
from .port_allocator import (
    PortWindow,
    ScopedPortAllocator,
    base_port,
    resolve_process_id,
    scope_slot,
)
from .random_source import LockedRandom, RandomSource
from .seed_selection import select_seeds, validate_seed_ordinals
from .topology import (
    DEFAULT_SETTINGS,
    ClusterTopology,
    SettingsSource,
    UnicastTopology,
    new_topology,
    new_unicast_topology,
)

__all__ = [
    "DEFAULT_SETTINGS",
    "ClusterTopology",
    "LockedRandom",
    "NodeIdentity",
    "PortWindow",
    "RandomSource",
    "Scope",
    "ScopedPortAllocator",
    "SettingsSource",
    "TopologyError",
    "TopologyPreconditionError",
    "TopologySettings",
    "TransportMode",
    "UnicastTopology",
    "base_port",
    "configure_logging",
    "get_random_source",
    "get_topology_settings",
    "new_topology",
    "new_unicast_topology",
    "reset_topology_settings",
    "resolve_process_id",
    "scope_slot",
    "select_seeds",
    "validate_seed_ordinals",
]
