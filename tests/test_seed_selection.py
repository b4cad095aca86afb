"""Tests for discovery seed selection."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from clustertopo.core.errors import TopologyPreconditionError
from clustertopo.core.random_source import LockedRandom
from clustertopo.core.seed_selection import select_seeds, validate_seed_ordinals


class TestSelectSeeds:
    """Test random and exhaustive seed selection."""

    @pytest.mark.parametrize("node_count", [1, 2, 5, 40])
    def test_all_nodes_are_seeds(self, node_count, scripted_rng):
        rng = scripted_rng()
        assert select_seeds(node_count, node_count, rng) == frozenset(
            range(node_count)
        )
        assert rng.calls == []

    def test_zero_seeds(self, seeded_rng):
        assert select_seeds(5, 0, seeded_rng) == frozenset()

    def test_partial_shuffle_draws(self, scripted_rng):
        # swap 0<->3, then 1<->1
        rng = scripted_rng(3, 1)
        assert select_seeds(5, 2, rng) == frozenset({3, 1})
        assert rng.calls == [(0, 4), (1, 4)]

    def test_exactly_seed_count_draws(self, scripted_rng):
        rng = scripted_rng(9, 9, 9)
        seeds = select_seeds(10, 3, rng)
        assert len(rng.calls) == 3
        assert len(seeds) == 3

    def test_too_many_seeds_fails_fast(self, seeded_rng):
        with pytest.raises(TopologyPreconditionError, match="seed_count"):
            select_seeds(3, 4, seeded_rng)

    def test_negative_seed_count(self, seeded_rng):
        with pytest.raises(TopologyPreconditionError):
            select_seeds(3, -1, seeded_rng)

    @pytest.mark.parametrize("node_count", [0, -2])
    def test_empty_topology(self, node_count, seeded_rng):
        with pytest.raises(TopologyPreconditionError, match="at least one node"):
            select_seeds(node_count, 0, seeded_rng)

    def test_same_seed_same_selection(self):
        first = select_seeds(20, 5, LockedRandom(seed=99))
        second = select_seeds(20, 5, LockedRandom(seed=99))
        assert first == second

    @given(
        st.integers(min_value=1, max_value=60).flatmap(
            lambda n: st.tuples(st.just(n), st.integers(min_value=0, max_value=n))
        ),
        st.integers(min_value=0, max_value=2**32),
    )
    def test_selection_size_and_range(self, counts, seed):
        node_count, seed_count = counts
        seeds = select_seeds(node_count, seed_count, LockedRandom(seed))
        assert len(seeds) == seed_count
        assert all(0 <= ordinal < node_count for ordinal in seeds)


class TestValidateSeedOrdinals:
    """Test explicit seed ordinals."""

    def test_order_preserved(self):
        assert validate_seed_ordinals(5, [4, 0, 2]) == (4, 0, 2)

    @pytest.mark.parametrize("ordinals", [[5], [-1], [0, 7]])
    def test_out_of_range(self, ordinals):
        with pytest.raises(TopologyPreconditionError, match="outside"):
            validate_seed_ordinals(5, ordinals)

    def test_duplicates_rejected(self):
        with pytest.raises(TopologyPreconditionError, match="Duplicate"):
            validate_seed_ordinals(5, [1, 1])
