"""speccompat CLI — Spec compatibility tracking across product dependencies.

Entry point for the ``speccompat`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    scenarios — Run the built-in acceptance scenarios.
    apply     — Apply a YAML plan of version puts and show the store.
    check     — Audit a store snapshot for stale compatibility.

Usage::

    speccompat scenarios                      # Run every scenario
    speccompat scenarios cycle-by-update -v   # One scenario, cascade traced
    speccompat apply plan.yaml -o store.json
    speccompat check store.json --expected expected.yaml
"""

from __future__ import annotations

import click

from speccompat import __version__
from speccompat.cli.apply_cmd import apply_command
from speccompat.cli.check_cmd import check_command
from speccompat.cli.scenarios_cmd import scenarios_command


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """speccompat: Spec compatibility tracking for product dependencies.

    Derive each product's compatible specs from its versions, cascade
    changes to dependent products, and reject versions whose declared
    specs exceed what their dependencies support.
    """


# Register all subcommands
cli.add_command(scenarios_command)
cli.add_command(apply_command)
cli.add_command(check_command)
