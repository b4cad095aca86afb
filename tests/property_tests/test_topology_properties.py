"""
Property-Based Tests for clustertopo topologies.

Key Test Areas:
- Seed selection: exact size, distinct members, range, termination
- Port windows: GLOBAL determinism and the transient slot set
- Node settings: idempotence, address/port consistency, override precedence
"""

from hypothesis import given
from hypothesis import strategies as st

from clustertopo.core.model import (
    LOCAL_ADDRESS_KEY,
    MULTICAST_ENABLED_KEY,
    NODE_MODE_KEY,
    TRANSPORT_PORT_KEY,
    UNICAST_HOSTS_KEY,
    Scope,
    TransportMode,
)
from clustertopo.core.port_allocator import base_port
from clustertopo.core.random_source import LockedRandom
from clustertopo.core.seed_selection import select_seeds
from clustertopo.core.topology import new_unicast_topology
from clustertopo.datastructures.settings_layer import settings_layer_strategy

# Test Strategies

random_seeds = st.integers(min_value=0, max_value=2**32)
process_ids = st.integers(min_value=0, max_value=10_000)
transient_scopes = st.sampled_from([Scope.SUITE, Scope.TEST])
modes = st.sampled_from([mode.value for mode in TransportMode])


@st.composite
def node_and_seed_counts(draw, max_nodes: int = 100):
    """Generate (node_count, seed_count) with 1 <= seed_count <= node_count."""
    node_count = draw(st.integers(min_value=1, max_value=max_nodes))
    seed_count = draw(st.integers(min_value=1, max_value=node_count))
    return node_count, seed_count


class TestSeedSelectionProperties:
    """Seed selection always terminates with the requested size."""

    @given(node_and_seed_counts(), random_seeds)
    def test_seed_set_shape(self, counts, seed):
        node_count, seed_count = counts
        seeds = select_seeds(node_count, seed_count, LockedRandom(seed))
        assert len(seeds) == seed_count
        assert seeds <= frozenset(range(node_count))

    @given(st.integers(min_value=1, max_value=100))
    def test_full_seed_set_is_deterministic(self, node_count):
        assert select_seeds(node_count, node_count) == frozenset(range(node_count))


class TestPortProperties:
    """Port windows depend only on process id and scope slot."""

    @given(process_ids)
    def test_global_port_is_stable(self, process_id):
        first = base_port(Scope.GLOBAL, process_id)
        assert first == base_port(Scope.GLOBAL, process_id)
        assert first == 30000 + 1000 * (process_id % 60)

    @given(process_ids, transient_scopes, random_seeds)
    def test_transient_port_in_slot_set(self, process_id, scope, seed):
        port = base_port(scope, process_id, LockedRandom(seed))
        expected = {30000 + 1000 * (process_id % 60) + 100 * k for k in range(1, 10)}
        assert port in expected


class TestNodeSettingsProperties:
    """Node settings are pure and consistent with the topology."""

    @given(node_and_seed_counts(max_nodes=60), modes, random_seeds, process_ids)
    def test_node_settings_consistent(self, counts, mode, seed, process_id):
        node_count, seed_count = counts
        topology = new_unicast_topology(
            node_count,
            Scope.SUITE,
            seed_count=seed_count,
            extra_settings={NODE_MODE_KEY: mode},
            rng=LockedRandom(seed),
            process_id=process_id,
        )
        for ordinal in range(node_count):
            settings = topology.node_settings(ordinal)
            assert settings == topology.node_settings(ordinal)
            assert settings.get_bool(MULTICAST_ENABLED_KEY) is False
            hosts = settings.get_list(UNICAST_HOSTS_KEY)
            assert len(hosts) == seed_count
            if mode == TransportMode.EMBEDDED.value:
                assert settings.get(LOCAL_ADDRESS_KEY) == f"node_{ordinal}"
            else:
                assert settings.get_int(TRANSPORT_PORT_KEY) == (
                    topology.base_port + ordinal
                )
                assert all(
                    topology.port_window.contains(int(host.rsplit(":", 1)[1]))
                    for host in hosts
                )

    @given(
        settings_layer_strategy(max_entries=5).filter(
            lambda layer: NODE_MODE_KEY not in layer
        ),
        random_seeds,
    )
    def test_caller_settings_always_win(self, extra, seed):
        topology = new_unicast_topology(
            4, Scope.TEST, seed_count=2, extra_settings=extra, rng=LockedRandom(seed)
        )
        settings = topology.node_settings(1)
        for key in extra:
            assert settings[key] == extra[key]
