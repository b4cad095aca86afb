"""Selection of the node ordinals that act as discovery seeds."""

from __future__ import annotations

from collections.abc import Iterable

from loguru import logger

from clustertopo.datastructures.type_aliases import NodeCount, NodeOrdinal, SeedCount

from .config import get_random_source
from .errors import TopologyPreconditionError
from .random_source import RandomSource


def _check_node_count(node_count: NodeCount) -> None:
    if node_count <= 0:
        raise TopologyPreconditionError(
            f"A topology needs at least one node, got node_count={node_count}"
        )


def select_seeds(
    node_count: NodeCount, seed_count: SeedCount, rng: RandomSource | None = None
) -> frozenset[NodeOrdinal]:
    """Pick ``seed_count`` distinct ordinals from ``[0, node_count)``.

    When every node is a seed the result is ``{0, ..., node_count - 1}`` and no
    randomness is consumed. Otherwise a partial Fisher-Yates shuffle over the
    ordinals is truncated after ``seed_count`` swaps, so exactly
    ``seed_count`` draws are made.

    Raises:
        TopologyPreconditionError: if ``node_count`` is not positive or
            ``seed_count`` lies outside ``[0, node_count]``.
    """
    _check_node_count(node_count)
    if not 0 <= seed_count <= node_count:
        raise TopologyPreconditionError(
            f"seed_count must be between 0 and node_count={node_count}, "
            f"got {seed_count}"
        )

    if seed_count == node_count:
        return frozenset(range(node_count))

    rng = rng if rng is not None else get_random_source()
    ordinals = list(range(node_count))
    for i in range(seed_count):
        j = rng.randint(i, node_count - 1)
        ordinals[i], ordinals[j] = ordinals[j], ordinals[i]

    seeds = frozenset(ordinals[:seed_count])
    logger.debug(
        "Selected {} of {} nodes as seeds: {}", seed_count, node_count, sorted(seeds)
    )
    return seeds


def validate_seed_ordinals(
    node_count: NodeCount, ordinals: Iterable[NodeOrdinal]
) -> tuple[NodeOrdinal, ...]:
    """Check caller-supplied seed ordinals and return them in the given order."""
    _check_node_count(node_count)
    checked = tuple(ordinals)
    for ordinal in checked:
        if not 0 <= ordinal < node_count:
            raise TopologyPreconditionError(
                f"Seed ordinal {ordinal} is outside [0, {node_count})"
            )
    if len(set(checked)) != len(checked):
        raise TopologyPreconditionError(f"Duplicate seed ordinals in {list(checked)}")
    return checked
