"""
clustertopo - deterministic topologies for simulated multi-node test clusters

Given a node count, a number of discovery seeds and an execution scope,
clustertopo produces the settings each node of a test cluster needs to find
its peers without multicast and without a coordination service: a network
identity, a seed-host list and a port inside a window reserved for the
cluster.

## Architecture

- **datastructures**: immutable SettingsLayer with override-by-merge semantics
- **core**: port windows per scope, seed selection, topology configurator
- **cli**: inspect generated settings from the command line

## Quick Start

```python
from clustertopo import Scope, new_unicast_topology

topology = new_unicast_topology(3, Scope.SUITE, seed_count=2)
settings = topology.node_settings(1)
settings.get_list("discovery.zen.ping.unicast.hosts")
```
"""

from .core import (
    DEFAULT_SETTINGS,
    ClusterTopology,
    NodeIdentity,
    PortWindow,
    Scope,
    ScopedPortAllocator,
    SettingsSource,
    TopologyError,
    TopologyPreconditionError,
    TopologySettings,
    TransportMode,
    UnicastTopology,
    base_port,
    new_topology,
    new_unicast_topology,
    select_seeds,
)
from .datastructures import SettingsLayer, merge

# Version info
__version__ = "0.1.0"
__license__ = "MIT"

__all__ = [
    # Settings
    "DEFAULT_SETTINGS",
    "SettingsLayer",
    "TopologySettings",
    "merge",
    # Topologies
    "ClusterTopology",
    "UnicastTopology",
    "SettingsSource",
    "NodeIdentity",
    "Scope",
    "TransportMode",
    "new_topology",
    "new_unicast_topology",
    # Building blocks
    "PortWindow",
    "ScopedPortAllocator",
    "base_port",
    "select_seeds",
    # Errors
    "TopologyError",
    "TopologyPreconditionError",
]
