"""Process-wide configuration for topology generation."""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .model import TransportMode
from .random_source import LockedRandom


class TopologySettings(BaseSettings):
    """clustertopo configuration, read from ``CLUSTERTOPO_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CLUSTERTOPO_", env_file=".env", extra="ignore"
    )

    process_id: int | None = Field(
        None,
        ge=0,
        description=(
            "Identifier of this test process. "
            "Defaults to the pytest-xdist worker number."
        ),
    )
    random_seed: int | None = Field(
        None,
        description=(
            "Seed for scope-slot and seed-host draws. "
            "Unset means a fresh seed per process."
        ),
    )
    node_mode: TransportMode = Field(
        TransportMode.EMBEDDED,
        description="Transport mode for topologies that do not set node.mode.",
    )
    log_level: str = Field("INFO", description="Log level for the clustertopo CLI.")

    @field_validator("node_mode", mode="before")
    @classmethod
    def validate_node_mode(cls, v: object) -> object:
        """Accept the local and network aliases of the transport modes."""
        if isinstance(v, str):
            return TransportMode.parse(v)
        return v


_topology_settings: TopologySettings | None = None
_random_source: LockedRandom | None = None


def get_topology_settings() -> TopologySettings:
    global _topology_settings
    if _topology_settings is None:
        _topology_settings = TopologySettings()
    return _topology_settings


def get_random_source() -> LockedRandom:
    """Return the shared randomness source, seeded from the settings."""
    global _random_source
    if _random_source is None:
        _random_source = LockedRandom(get_topology_settings().random_seed)
    return _random_source


def reset_topology_settings() -> None:
    """Drop the cached settings and randomness source so the environment is re-read."""
    global _topology_settings, _random_source
    _topology_settings = None
    _random_source = None
