"""
Core model types for test-cluster topologies.

Scopes partition the port space by topology lifetime, transport modes pick
between in-process and socket addressing, and the key constants name the
node-bootstrap settings this package writes.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from clustertopo.datastructures.type_aliases import NodeOrdinal, SettingName

from .errors import TopologyPreconditionError

# Settings keys consumed by the node bootstrap
NODE_MODE_KEY: SettingName = "node.mode"
MULTICAST_ENABLED_KEY: SettingName = "discovery.zen.ping.multicast.enabled"
UNICAST_HOSTS_KEY: SettingName = "discovery.zen.ping.unicast.hosts"
LOCAL_ADDRESS_KEY: SettingName = "transport.local.address"
TRANSPORT_PORT_KEY: SettingName = "transport.tcp.port"
TRANSPORT_HOST_KEY: SettingName = "transport.host"
GATEWAY_TYPE_KEY: SettingName = "gateway.type"
DISCOVERY_TYPE_KEY: SettingName = "discovery.type"

NETWORK_HOST = "localhost"
EMBEDDED_ADDRESS_PREFIX = "node_"


class Scope(Enum):
    """Lifetime class of a test topology."""

    GLOBAL = "global"  # one per process, lives as long as the process
    SUITE = "suite"
    TEST = "test"

    @classmethod
    def parse(cls, value: str | Scope) -> Scope:
        if isinstance(value, Scope):
            return value
        try:
            return cls(value.strip().lower())
        except ValueError as e:
            choices = ", ".join(scope.value for scope in cls)
            raise TopologyPreconditionError(
                f"Unknown scope {value!r}. Available: {choices}"
            ) from e


class TransportMode(Enum):
    """How nodes of a topology address each other."""

    EMBEDDED = "embedded"
    NETWORKED = "networked"

    @classmethod
    def parse(cls, value: str | TransportMode) -> TransportMode:
        if isinstance(value, TransportMode):
            return value
        normalized = value.strip().lower()
        # "local" and "network" are the node bootstrap's own spellings
        aliases = {"local": cls.EMBEDDED, "network": cls.NETWORKED}
        if normalized in aliases:
            return aliases[normalized]
        try:
            return cls(normalized)
        except ValueError as e:
            choices = ", ".join(mode.value for mode in cls)
            raise TopologyPreconditionError(
                f"Unknown node mode {value!r}. Available: {choices}"
            ) from e


@dataclass(frozen=True, slots=True)
class NodeIdentity:
    """Ordinal and transport mode of one node, derived per settings request."""

    ordinal: NodeOrdinal
    transport_mode: TransportMode

    def __post_init__(self) -> None:
        if self.ordinal < 0:
            raise TopologyPreconditionError(
                f"Node ordinal must be non-negative, got {self.ordinal}"
            )

    @property
    def is_embedded(self) -> bool:
        return self.transport_mode is TransportMode.EMBEDDED

    def embedded_address(self) -> str:
        return f"{EMBEDDED_ADDRESS_PREFIX}{self.ordinal}"
