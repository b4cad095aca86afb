"""
Test-cluster topologies: per-node settings for independently started nodes.

A topology knows how many nodes a test cluster has and, for unicast
topologies, which of them are discovery seeds and which port window the
cluster owns. From that it manufactures the settings each node needs to find
its peers without multicast and without a coordination service.

Topologies are immutable. ``node_settings()`` and ``client_settings()`` are
pure reads: repeated calls with the same ordinal return equal layers.
"""

# Explicit unicast seeding is a stopgap for test clusters whose node bootstrap
# cannot discover peers reliably on its own (added 2026-10). Drop this module
# once the bootstrap ships seed discovery and no test builds UnicastTopology.

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from loguru import logger

from clustertopo.datastructures.settings_layer import SettingsLayer
from clustertopo.datastructures.type_aliases import (
    NodeCount,
    NodeOrdinal,
    PortNumber,
    ProcessId,
    SeedCount,
    SeedHostAddress,
)

from .config import get_topology_settings
from .errors import TopologyPreconditionError
from .model import (
    DISCOVERY_TYPE_KEY,
    EMBEDDED_ADDRESS_PREFIX,
    GATEWAY_TYPE_KEY,
    LOCAL_ADDRESS_KEY,
    MULTICAST_ENABLED_KEY,
    NETWORK_HOST,
    NODE_MODE_KEY,
    TRANSPORT_HOST_KEY,
    TRANSPORT_PORT_KEY,
    UNICAST_HOSTS_KEY,
    NodeIdentity,
    Scope,
    TransportMode,
)
from .port_allocator import PORTS_PER_SCOPE, PortWindow, ScopedPortAllocator
from .random_source import RandomSource
from .seed_selection import select_seeds, validate_seed_ordinals

DEFAULT_SETTINGS = SettingsLayer.from_dict(
    {
        GATEWAY_TYPE_KEY: "local",
        DISCOVERY_TYPE_KEY: "zen",
    }
)

type ExtraSettings = SettingsLayer | Mapping[str, object] | None


@runtime_checkable
class SettingsSource(Protocol):
    """Supplies settings to the node bootstrap of a test cluster."""

    def node_settings(self, ordinal: NodeOrdinal) -> SettingsLayer: ...

    def client_settings(self) -> SettingsLayer: ...


def _as_layer(settings: ExtraSettings) -> SettingsLayer:
    if settings is None:
        return SettingsLayer.empty()
    if isinstance(settings, SettingsLayer):
        return settings
    return SettingsLayer.from_dict(settings)


@dataclass(frozen=True, slots=True)
class ClusterTopology:
    """Topology that leaves discovery to the nodes' default mechanism."""

    node_count: NodeCount
    extra_settings: SettingsLayer = field(default_factory=SettingsLayer.empty)
    default_mode: TransportMode | None = None
    base_settings: SettingsLayer = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.node_count <= 0:
            raise TopologyPreconditionError(
                "A topology needs at least one node, "
                f"got node_count={self.node_count}"
            )
        object.__setattr__(self, "extra_settings", _as_layer(self.extra_settings))
        if self.default_mode is None:
            object.__setattr__(
                self, "default_mode", get_topology_settings().node_mode
            )
        object.__setattr__(
            self, "base_settings", DEFAULT_SETTINGS.merge(self.extra_settings)
        )

    def check_ordinal(self, ordinal: NodeOrdinal) -> None:
        if not 0 <= ordinal < self.node_count:
            raise TopologyPreconditionError(
                f"Node ordinal {ordinal} is outside [0, {self.node_count})"
            )

    def transport_mode(self) -> TransportMode:
        """Mode from the ``node.mode`` setting, else the configured default."""
        mode = self.base_settings.get_str(NODE_MODE_KEY)
        return TransportMode.parse(mode) if mode is not None else self.default_mode

    def node_identity(self, ordinal: NodeOrdinal) -> NodeIdentity:
        self.check_ordinal(ordinal)
        return NodeIdentity(ordinal=ordinal, transport_mode=self.transport_mode())

    def node_settings(self, ordinal: NodeOrdinal) -> SettingsLayer:
        self.check_ordinal(ordinal)
        return self.base_settings

    def client_settings(self) -> SettingsLayer:
        return self.base_settings

    def all_node_settings(self) -> tuple[SettingsLayer, ...]:
        return tuple(
            self.node_settings(ordinal) for ordinal in range(self.node_count)
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class UnicastTopology(ClusterTopology):
    """
    Topology whose nodes find each other through an explicit seed-host list.

    Each node gets settings that disable multicast discovery and list the
    addresses of the seed nodes. In embedded mode nodes are addressed by name
    (``node_<ordinal>``); in networked mode each node is pinned to
    ``localhost:<base_port + ordinal>`` inside the topology's port window.

    The computed discovery settings form the base layer and the topology's
    own settings are merged on top, so callers can override any computed
    value (for example turn multicast back on) through ``extra_settings``.
    """

    seed_ordinals: tuple[NodeOrdinal, ...]
    scope: Scope
    base_port: PortNumber

    def __post_init__(self) -> None:
        ClusterTopology.__post_init__(self)
        object.__setattr__(
            self,
            "seed_ordinals",
            validate_seed_ordinals(self.node_count, self.seed_ordinals),
        )
        mode = self.transport_mode()
        if mode is TransportMode.NETWORKED and self.node_count > PORTS_PER_SCOPE:
            raise TopologyPreconditionError(
                f"A networked topology fits at most {PORTS_PER_SCOPE} nodes in its "
                f"port window, got node_count={self.node_count}"
            )

    @property
    def port_window(self) -> PortWindow:
        return PortWindow(start=self.base_port)

    def seed_hosts(self, mode: TransportMode) -> tuple[SeedHostAddress, ...]:
        """Addresses of the seed nodes as seen by a node in ``mode``."""
        if mode is TransportMode.EMBEDDED:
            return tuple(
                f"{EMBEDDED_ADDRESS_PREFIX}{ordinal}" for ordinal in self.seed_ordinals
            )
        window = self.port_window
        return tuple(
            f"{NETWORK_HOST}:{window.port_for(ordinal)}"
            for ordinal in self.seed_ordinals
        )

    def node_settings(self, ordinal: NodeOrdinal) -> SettingsLayer:
        identity = self.node_identity(ordinal)

        computed: dict[str, object] = {MULTICAST_ENABLED_KEY: False}
        if identity.is_embedded:
            computed[LOCAL_ADDRESS_KEY] = identity.embedded_address()
        else:
            # pin port and host so the seed list points at real listeners
            computed[TRANSPORT_PORT_KEY] = self.port_window.port_for(ordinal)
            computed[TRANSPORT_HOST_KEY] = NETWORK_HOST
        computed[UNICAST_HOSTS_KEY] = self.seed_hosts(identity.transport_mode)

        return SettingsLayer.from_dict(computed).merge(self.base_settings)


def new_topology(
    node_count: NodeCount, extra_settings: ExtraSettings = None
) -> ClusterTopology:
    """Build a topology that relies on the nodes' default discovery."""
    return ClusterTopology(
        node_count=node_count, extra_settings=_as_layer(extra_settings)
    )


def new_unicast_topology(
    node_count: NodeCount,
    scope: Scope | str,
    *,
    seed_count: SeedCount | None = None,
    seed_ordinals: Iterable[NodeOrdinal] | None = None,
    extra_settings: ExtraSettings = None,
    rng: RandomSource | None = None,
    process_id: ProcessId | None = None,
) -> UnicastTopology:
    """Build a unicast topology.

    Args:
        node_count: Number of nodes in the cluster.
        scope: Lifetime class of the cluster; selects the port slot.
        seed_count: How many randomly chosen nodes act as seeds. Defaults to
            every node.
        seed_ordinals: Explicit seed ordinals, used verbatim. Mutually
            exclusive with ``seed_count``.
        extra_settings: Settings merged over the defaults; they also win over
            computed discovery settings.
        rng: Randomness source for seed and port-slot draws.
        process_id: Identifier of this test process; see
            ``clustertopo.core.port_allocator``.

    Raises:
        TopologyPreconditionError: on an empty topology, an impossible seed
            count, bad seed ordinals, both seed arguments at once, an unknown
            node mode, or a networked cluster larger than its port window.
    """
    scope = Scope.parse(scope)
    if seed_count is not None and seed_ordinals is not None:
        raise TopologyPreconditionError(
            "Pass either seed_count or seed_ordinals, not both"
        )

    if seed_ordinals is not None:
        ordinals = validate_seed_ordinals(node_count, seed_ordinals)
    else:
        if seed_count is None:
            seed_count = node_count
        ordinals = tuple(sorted(select_seeds(node_count, seed_count, rng)))
    if not ordinals:
        raise TopologyPreconditionError(
            "A unicast topology needs at least one seed node"
        )

    window = ScopedPortAllocator(process_id=process_id, rng=rng).allocate_window(scope)
    topology = UnicastTopology(
        node_count=node_count,
        extra_settings=_as_layer(extra_settings),
        seed_ordinals=ordinals,
        scope=scope,
        base_port=window.start,
    )
    logger.debug(
        "Built {} unicast topology: {} nodes, seeds {}, base port {}",
        scope.value,
        node_count,
        list(ordinals),
        window.start,
    )
    return topology
