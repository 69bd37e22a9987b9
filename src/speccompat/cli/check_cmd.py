"""``speccompat check <snapshot>`` — Audit a store snapshot.

Loads a snapshot written by ``apply --snapshot`` (or by hand), verifies that
every product's stored compatible set matches a fresh derivation, and
optionally compares the whole store against an expected snapshot.

Exit Codes:
    0 — The store is consistent (and matches the expected snapshot).
    1 — A product is stale or the expected snapshot differs.
    2 — A snapshot could not be read.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from speccompat.cli.output import report_to_json
from speccompat.core.compatibility import check_consistency
from speccompat.core.store import CompatibilityStore, read_snapshot_file
from speccompat.exceptions import SnapshotError


@click.command("check")
@click.argument("snapshot_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--expected", "expected_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Expected snapshot the store must equal.",
)
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
def check_command(
    snapshot_path: str,
    expected_path: str | None,
    output_format: str,
) -> None:
    """Check that the store in SNAPSHOT_PATH is consistent.

    Exit code 0 if consistent, 1 if not, 2 if a snapshot is unreadable.
    """
    try:
        store = CompatibilityStore.read(Path(snapshot_path))
        expected = read_snapshot_file(Path(expected_path)) if expected_path else None
    except SnapshotError as exc:
        if output_format == "json":
            click.echo(json.dumps({"error": str(exc)}))
        else:
            click.echo(f"Error: {exc}")
        sys.exit(2)

    report = check_consistency(store, expected)

    if output_format == "json":
        click.echo(json.dumps(report_to_json(report), indent=2))
    else:
        from speccompat.cli.output import print_consistency_report
        print_consistency_report(report)

    sys.exit(0 if report.ok else 1)
