"""
Immutable settings layers for test-cluster nodes.

A SettingsLayer is a flat key/value view of node configuration. Layers are
never mutated: merging two layers builds a third in which every key of the
overriding layer shadows the same key of the base layer. Stacking several
layers is therefore a left-to-right fold of merge().

Values are restricted to scalars (str, int, float, bool) and tuples of
strings so every layer stays hashable and can be compared by value.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field

from hypothesis import strategies as st

from .type_aliases import JsonDict, SettingName, SettingValue

_TRUE_STRINGS = frozenset({"true", "yes", "on", "1"})
_FALSE_STRINGS = frozenset({"false", "no", "off", "0"})


def _normalize_value(key: SettingName, value: object) -> SettingValue:
    if isinstance(value, bool | int | float | str):
        return value
    if isinstance(value, list | tuple | set | frozenset):
        if isinstance(value, set | frozenset):
            value = sorted(value, key=str)
        return tuple(str(item) for item in value)
    raise TypeError(
        f"Unsupported value type for setting {key!r}: {type(value).__name__}"
    )


@dataclass(frozen=True, slots=True)
class SettingEntry:
    """Single key/value pair in a settings layer."""

    key: SettingName
    value: SettingValue

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("Setting key cannot be empty")
        object.__setattr__(self, "value", _normalize_value(self.key, self.value))


@dataclass(frozen=True, slots=True)
class SettingsLayer:
    """
    Immutable, value-comparable collection of node settings.

    Entries are kept sorted by key so two layers holding the same pairs are
    equal (and hash equal) no matter which sequence of merges produced them.
    """

    _entries: tuple[SettingEntry, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        keys = [entry.key for entry in self._entries]
        if len(keys) != len(set(keys)):
            raise ValueError("Duplicate keys in settings layer")
        if keys != sorted(keys):
            object.__setattr__(
                self,
                "_entries",
                tuple(sorted(self._entries, key=lambda entry: entry.key)),
            )

    @classmethod
    def empty(cls) -> SettingsLayer:
        """Create a layer with no settings."""
        return cls()

    @classmethod
    def from_dict(cls, values: Mapping[SettingName, object]) -> SettingsLayer:
        """Create a layer from a plain mapping."""
        return cls(
            _entries=tuple(
                SettingEntry(key=key, value=value)  # type: ignore[arg-type]
                for key, value in values.items()
            )
        )

    @classmethod
    def from_pairs(cls, pairs: Iterable[str]) -> SettingsLayer:
        """Create a layer from ``key=value`` strings, later pairs winning."""
        values: dict[str, str] = {}
        for pair in pairs:
            key, sep, value = pair.partition("=")
            if not sep or not key.strip():
                raise ValueError(f"Expected key=value, got {pair!r}")
            values[key.strip()] = value.strip()
        return cls.from_dict(values)

    def to_dict(self) -> JsonDict:
        """Convert to a plain dictionary; tuple values become lists."""
        return {
            entry.key: list(entry.value)
            if isinstance(entry.value, tuple)
            else entry.value
            for entry in self._entries
        }

    def merge(
        self, overrides: SettingsLayer | Mapping[str, object] | None
    ) -> SettingsLayer:
        """Return a new layer where every key of ``overrides`` shadows this one."""
        if overrides is None:
            return self
        if not isinstance(overrides, SettingsLayer):
            overrides = SettingsLayer.from_dict(overrides)
        if not overrides._entries:
            return self
        if not self._entries:
            return overrides

        overridden = {entry.key for entry in overrides._entries}
        kept = [entry for entry in self._entries if entry.key not in overridden]
        return SettingsLayer(_entries=tuple(kept) + overrides._entries)

    def with_value(self, key: SettingName, value: object) -> SettingsLayer:
        """Return a new layer with a single key set."""
        return self.merge(SettingsLayer.from_dict({key: value}))

    def with_values(self, values: Mapping[SettingName, object]) -> SettingsLayer:
        """Return a new layer with every key of ``values`` set."""
        return self.merge(SettingsLayer.from_dict(values))

    def _find(self, key: SettingName) -> SettingEntry | None:
        for entry in self._entries:
            if entry.key == key:
                return entry
        return None

    def get(
        self, key: SettingName, default: SettingValue | None = None
    ) -> SettingValue | None:
        entry = self._find(key)
        return default if entry is None else entry.value

    def get_str(self, key: SettingName, default: str | None = None) -> str | None:
        entry = self._find(key)
        if entry is None:
            return default
        if isinstance(entry.value, tuple):
            return ",".join(entry.value)
        if isinstance(entry.value, bool):
            return "true" if entry.value else "false"
        return str(entry.value)

    def get_int(self, key: SettingName, default: int | None = None) -> int | None:
        entry = self._find(key)
        if entry is None:
            return default
        value = entry.value
        if isinstance(value, bool) or isinstance(value, tuple):
            raise ValueError(f"Setting {key!r} is not an integer: {value!r}")
        try:
            return int(value)
        except ValueError as e:
            raise ValueError(f"Setting {key!r} is not an integer: {value!r}") from e

    def get_bool(self, key: SettingName, default: bool | None = None) -> bool | None:
        entry = self._find(key)
        if entry is None:
            return default
        value = entry.value
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in _TRUE_STRINGS:
                return True
            if lowered in _FALSE_STRINGS:
                return False
        raise ValueError(f"Setting {key!r} is not a boolean: {value!r}")

    def get_list(
        self, key: SettingName, default: tuple[str, ...] = ()
    ) -> tuple[str, ...]:
        """Get a sequence setting; comma-separated strings are split."""
        entry = self._find(key)
        if entry is None:
            return default
        value = entry.value
        if isinstance(value, tuple):
            return value
        if isinstance(value, str):
            return tuple(part.strip() for part in value.split(",") if part.strip())
        return (str(value),)

    def keys(self) -> tuple[SettingName, ...]:
        return tuple(entry.key for entry in self._entries)

    def __getitem__(self, key: SettingName) -> SettingValue:
        entry = self._find(key)
        if entry is None:
            raise KeyError(key)
        return entry.value

    def __contains__(self, key: object) -> bool:
        return any(entry.key == key for entry in self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[SettingName]:
        return iter(self.keys())

    def __str__(self) -> str:
        pairs = ", ".join(f"{entry.key}={entry.value!r}" for entry in self._entries)
        return f"SettingsLayer({pairs})"


def merge(
    base: SettingsLayer, overrides: SettingsLayer | Mapping[str, object] | None
) -> SettingsLayer:
    """Merge ``overrides`` on top of ``base`` into a new layer."""
    return base.merge(overrides)


# Hypothesis strategies for property-based testing

_key_alphabet = st.characters(
    categories=["Ll", "Nd"], include_characters="._"
)


def setting_entry_strategy() -> st.SearchStrategy[SettingEntry]:
    """Generate valid SettingEntry instances for testing."""
    return st.builds(
        SettingEntry,
        key=st.text(min_size=1, max_size=20, alphabet=_key_alphabet),
        value=st.one_of(
            st.text(max_size=20),
            st.integers(min_value=-(2**31), max_value=2**31),
            st.booleans(),
            st.lists(st.text(max_size=10), max_size=5).map(tuple),
        ),
    )


def settings_layer_strategy(
    max_entries: int = 10,
) -> st.SearchStrategy[SettingsLayer]:
    """Generate valid SettingsLayer instances with unique keys."""
    return st.lists(
        setting_entry_strategy(),
        max_size=max_entries,
        unique_by=lambda entry: entry.key,
    ).map(lambda entries: SettingsLayer(_entries=tuple(entries)))
