"""
Semantic type aliases for clustertopo datastructures.

Meaningful names for the raw ints and strings that flow between the seed
selector, the port allocator and the topology configurator.
"""

from typing import Any

# Node and topology types
type NodeOrdinal = int
type NodeCount = int
type SeedCount = int
type ProcessId = int
type ScopeSlot = int

# Network types
type HostAddress = str
type PortNumber = int
type SeedHostAddress = str

# Configuration types
type SettingName = str
type SettingScalar = str | int | float | bool
type SettingValue = SettingScalar | tuple[str, ...]
type ConfigValue = Any

# Serialization types
type JsonDict = dict[str, Any]
