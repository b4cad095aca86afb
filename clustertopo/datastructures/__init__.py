"""
clustertopo datastructures.

Key datastructures:
- SettingsLayer: immutable key/value settings with override-by-merge semantics
"""

from __future__ import annotations

from .settings_layer import (
    SettingEntry,
    SettingsLayer,
    merge,
    setting_entry_strategy,
    settings_layer_strategy,
)
from .type_aliases import (
    HostAddress,
    NodeCount,
    NodeOrdinal,
    PortNumber,
    ProcessId,
    ScopeSlot,
    SeedCount,
    SeedHostAddress,
    SettingName,
    SettingValue,
)

__all__ = [
    "HostAddress",
    "NodeCount",
    "NodeOrdinal",
    "PortNumber",
    "ProcessId",
    "ScopeSlot",
    "SeedCount",
    "SeedHostAddress",
    "SettingEntry",
    "SettingName",
    "SettingValue",
    "SettingsLayer",
    "merge",
    "setting_entry_strategy",
    "settings_layer_strategy",
]
