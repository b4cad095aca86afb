#!/usr/bin/env python3
"""
Command line entry point for clustertopo.

Prints the settings a test cluster's nodes and clients would receive:
- Per-node settings for one ordinal or the whole cluster
- Client settings
- The port window a process gets for a scope
"""

import json
import sys
from collections.abc import Callable
from typing import Any, NoReturn

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from clustertopo.core.config import get_topology_settings
from clustertopo.core.errors import TopologyPreconditionError
from clustertopo.core.logging import configure_logging
from clustertopo.core.model import NODE_MODE_KEY, Scope, TransportMode
from clustertopo.core.port_allocator import ScopedPortAllocator
from clustertopo.core.random_source import LockedRandom
from clustertopo.core.topology import (
    ClusterTopology,
    UnicastTopology,
    new_topology,
    new_unicast_topology,
)
from clustertopo.datastructures.settings_layer import SettingsLayer

console = Console()

SCOPE_CHOICES = [scope.value for scope in Scope]
MODE_CHOICES = [mode.value for mode in TransportMode]


def _fail(message: str) -> NoReturn:
    console.print(f"[red]❌ {escape(message)}[/red]")
    sys.exit(1)


def _format_value(value: Any) -> str:
    if isinstance(value, tuple):
        return ", ".join(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def display_settings(title: str, settings: SettingsLayer) -> None:
    """Display a settings layer in a rich table."""
    table = Table(title=title)
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")
    for key in settings:
        table.add_row(key, _format_value(settings[key]))
    console.print(table)


def topology_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by every command that builds a topology."""
    options = [
        click.option(
            "--nodes", "-n", type=int, required=True, help="Number of nodes"
        ),
        click.option(
            "--seeds",
            "-k",
            type=int,
            default=None,
            help="Number of randomly chosen seed nodes (default: every node)",
        ),
        click.option(
            "--seed-ordinal",
            "seed_ordinals",
            type=int,
            multiple=True,
            help="Explicit seed ordinal; repeat for several",
        ),
        click.option(
            "--scope",
            type=click.Choice(SCOPE_CHOICES),
            default=None,
            help="Topology scope, selects the port slot (default: suite)",
        ),
        click.option(
            "--mode",
            type=click.Choice(MODE_CHOICES),
            default=None,
            help="Node transport mode (default: CLUSTERTOPO_NODE_MODE)",
        ),
        click.option(
            "--set",
            "extra",
            multiple=True,
            metavar="KEY=VALUE",
            help="Extra setting merged over computed values; repeat for several",
        ),
        click.option(
            "--multicast",
            is_flag=True,
            help="Build a plain topology that keeps multicast discovery",
        ),
        click.option("--process-id", type=int, default=None, help="Process id"),
        click.option(
            "--random-seed", type=int, default=None, help="Seed for random draws"
        ),
        click.option(
            "--output",
            "-o",
            type=click.Choice(["table", "json"]),
            default="table",
            help="Output format",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def build_topology(
    nodes: int,
    seeds: int | None,
    seed_ordinals: tuple[int, ...],
    scope: str | None,
    mode: str | None,
    extra: tuple[str, ...],
    multicast: bool,
    process_id: int | None,
    random_seed: int | None,
) -> ClusterTopology | UnicastTopology:
    extra_settings = SettingsLayer.empty()
    if mode is not None:
        extra_settings = extra_settings.with_value(NODE_MODE_KEY, mode)
    extra_settings = extra_settings.merge(SettingsLayer.from_pairs(extra))

    if multicast:
        if seeds is not None or seed_ordinals or scope is not None:
            raise TopologyPreconditionError(
                "--multicast cannot be combined with --seeds, --seed-ordinal "
                "or --scope"
            )
        return new_topology(nodes, extra_settings)

    rng = LockedRandom(random_seed) if random_seed is not None else None
    return new_unicast_topology(
        nodes,
        scope or Scope.SUITE.value,
        seed_count=seeds,
        seed_ordinals=seed_ordinals or None,
        extra_settings=extra_settings,
        rng=rng,
        process_id=process_id,
    )


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--debug-scope",
    "debug_scopes",
    multiple=True,
    metavar="MODULE",
    help="Log DEBUG records from one module, e.g. core.seed_selection; repeatable",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, debug_scopes: tuple[str, ...]) -> None:
    """
    clustertopo test-cluster topology CLI.

    Shows the settings generated for the nodes and clients of a simulated
    multi-node test cluster.
    """
    try:
        settings = get_topology_settings()
    except ValueError as e:
        _fail(f"Invalid CLUSTERTOPO_* environment: {e}")

    level = "DEBUG" if verbose else settings.log_level
    configure_logging(level, debug_scopes=debug_scopes)
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


@cli.command()
@click.argument("ordinal", type=int)
@topology_options
def node(ordinal: int, output: str, **kwargs: Any) -> None:
    """Show the settings of one node."""
    try:
        topology = build_topology(**kwargs)
        settings = topology.node_settings(ordinal)
    except ValueError as e:
        _fail(str(e))

    if output == "json":
        click.echo(json.dumps(settings.to_dict(), indent=2))
    else:
        display_settings(f"Node {ordinal} Settings", settings)


@cli.command()
@topology_options
def cluster(output: str, **kwargs: Any) -> None:
    """Show the settings of every node in the cluster."""
    try:
        topology = build_topology(**kwargs)
        all_settings = topology.all_node_settings()
    except ValueError as e:
        _fail(str(e))

    if output == "json":
        nodes = [
            {"ordinal": ordinal, "settings": settings.to_dict()}
            for ordinal, settings in enumerate(all_settings)
        ]
        click.echo(json.dumps(nodes, indent=2))
    else:
        for ordinal, settings in enumerate(all_settings):
            display_settings(f"Node {ordinal} Settings", settings)


@cli.command()
@topology_options
def client(output: str, **kwargs: Any) -> None:
    """Show the settings a topology-wide client receives."""
    try:
        topology = build_topology(**kwargs)
    except ValueError as e:
        _fail(str(e))

    settings = topology.client_settings()
    if output == "json":
        click.echo(json.dumps(settings.to_dict(), indent=2))
    else:
        display_settings("Client Settings", settings)


@cli.command("base-port")
@click.option(
    "--scope",
    type=click.Choice(SCOPE_CHOICES),
    default=Scope.GLOBAL.value,
    help="Topology scope",
)
@click.option("--process-id", type=int, default=None, help="Process id")
@click.option("--random-seed", type=int, default=None, help="Seed for random draws")
@click.option(
    "--output",
    "-o",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)
def base_port_command(
    scope: str, process_id: int | None, random_seed: int | None, output: str
) -> None:
    """Show the port window reserved for a topology of SCOPE."""
    rng = LockedRandom(random_seed) if random_seed is not None else None
    try:
        allocator = ScopedPortAllocator(process_id=process_id, rng=rng)
        window = allocator.allocate_window(Scope.parse(scope))
    except TopologyPreconditionError as e:
        _fail(str(e))

    worker_info = allocator.get_worker_info()
    info = {
        "scope": scope,
        "worker_id": worker_info["worker_id"],
        "process_id": worker_info["process_id"],
        "start": window.start,
        "end": window.end,
        "process_range": worker_info["process_range"],
    }
    if output == "json":
        click.echo(json.dumps(info, indent=2))
        return

    table = Table(title="Port Window")
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")
    for key, value in info.items():
        if key == "process_range":
            value = f"{value['start']}-{value['end']}"
        table.add_row(key, str(value))
    console.print(table)


def main():
    """Main CLI entry point."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]⚠️ Operation cancelled by user[/yellow]")
        sys.exit(1)


if __name__ == "__main__":
    main()
