"""``speccompat apply <plan>`` — Apply a YAML plan to a fresh store.

Creates the plan's products, runs its version puts in order, prints the
resulting store, and optionally writes a snapshot for later ``check``.

Exit Codes:
    0 — Every version in the plan was admitted.
    1 — One or more versions were rejected.
    2 — The plan file is invalid.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from speccompat.cli.output import admission_to_json, configure_logging
from speccompat.exceptions import PlanError
from speccompat.harness import apply_plan, load_plan


@click.command("apply")
@click.argument("plan_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--snapshot", "-o", "snapshot_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write the resulting store snapshot here (.json, .yaml or .yml).",
)
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
@click.option("--verbose", "-v", is_flag=True, help="Trace the compatibility cascade.")
def apply_command(
    plan_path: str,
    snapshot_path: str | None,
    output_format: str,
    verbose: bool,
) -> None:
    """Apply the version puts in PLAN_PATH and show the resulting store.

    Exit code 0 if every version is admitted, 1 if any is rejected,
    2 if the plan is invalid.
    """
    configure_logging(verbose)

    try:
        plan = load_plan(Path(plan_path))
    except PlanError as exc:
        if output_format == "json":
            click.echo(json.dumps({"error": str(exc)}))
        else:
            click.echo(f"Error: {exc}")
        sys.exit(2)

    outcome = apply_plan(plan)

    if snapshot_path:
        outcome.store.write(Path(snapshot_path))

    if output_format == "json":
        click.echo(json.dumps({
            "products": outcome.product_ids,
            "steps": [admission_to_json(a) for a in outcome.admissions],
            "store": outcome.store.to_dict(),
        }, indent=2))
    else:
        from speccompat.cli.output import print_admissions, print_store
        print_admissions(outcome.admissions)
        print_store(outcome.store)
        if snapshot_path:
            click.echo(f"\nSnapshot written to: {snapshot_path}")

    sys.exit(1 if outcome.rejected else 0)
