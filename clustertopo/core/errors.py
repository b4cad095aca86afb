"""Exceptions raised by the topology generator."""

from __future__ import annotations


class TopologyError(Exception):
    """Base exception for topology generation errors."""

    pass


class TopologyPreconditionError(TopologyError, ValueError):
    """Raised when a caller passes parameters that violate a topology contract.

    Covers empty topologies, more seeds than nodes, ordinals outside
    ``[0, node_count)``, duplicated seed ordinals, unknown node modes and
    negative process ids. Nothing is clamped or retried.
    """

    pass
