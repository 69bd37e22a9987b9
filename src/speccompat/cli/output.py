"""Rich output formatting helpers for the speccompat CLI.

Provides terminal rendering for store contents, admissions, scenario
results, and consistency reports, plus the ``--verbose`` logging setup.
"""

from __future__ import annotations

import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from speccompat.core.compatibility import Admission, ConsistencyReport
from speccompat.core.store import CompatibilityStore
from speccompat.harness import ScenarioResult

console = Console()
err_console = Console(stderr=True)


def _specs(specs: Any) -> str:
    return ", ".join(sorted(specs)) or "-"


def configure_logging(verbose: bool) -> None:
    """Route ``speccompat`` log records to stderr through Rich.

    Without ``verbose`` only warnings are shown; with it the cascade is
    traced at DEBUG level.
    """
    pkg_logger = logging.getLogger("speccompat")
    for handler in list(pkg_logger.handlers):
        if isinstance(handler, RichHandler):
            pkg_logger.removeHandler(handler)
    pkg_logger.addHandler(
        RichHandler(console=err_console, show_path=False, show_time=False)
    )
    pkg_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def print_store(store: CompatibilityStore) -> None:
    """Print products and versions as two tables.

    Args:
        store: The store to display.
    """
    if not store.products:
        console.print("[dim]Store is empty.[/dim]")
        return

    products = Table(title="Products", show_header=True, header_style="bold")
    products.add_column("Product", style="bold")
    products.add_column("Compatible")
    products.add_column("Versions", style="dim")
    for pid, product in store.products.items():
        compatible = Text(_specs(product.compatible), style="green" if product.compatible else "dim")
        products.add_row(pid, compatible, ", ".join(product.versions) or "-")
    console.print(products)

    if store.versions:
        versions = Table(title="Versions", show_header=True, header_style="bold")
        versions.add_column("Version", style="bold")
        versions.add_column("Product")
        versions.add_column("Supports")
        versions.add_column("Dependencies", style="dim")
        for vid, version in store.versions.items():
            versions.add_row(
                vid, version.product, _specs(version.supports),
                ", ".join(version.dependencies) or "-",
            )
        console.print(versions)


def print_admissions(admissions: list[Admission]) -> None:
    """Print one line per version put, accepted or rejected."""
    for index, admission in enumerate(admissions):
        if admission.accepted:
            console.print(
                f"  [green]step {index}: {admission.product_id} "
                f"stored {admission.version_id}[/green]"
                f" [dim](recommitted {', '.join(admission.committed)})[/dim]"
            )
        else:
            console.print(
                f"  [red]step {index}: {admission.product_id} rejected; "
                f"dependencies do not allow {_specs(admission.disallowed)}[/red]"
            )


def print_scenario_results(results: list[ScenarioResult]) -> None:
    """Print a summary table of scenario results.

    Args:
        results: Results from ``run_scenarios``.
    """
    table = Table(title="Compatibility Scenarios", show_header=True, header_style="bold")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Scenario", style="bold")
    table.add_column("Description")
    table.add_column("Result", justify="center")

    for index, result in enumerate(results, start=1):
        style = "bold green" if result.passed else "bold red"
        table.add_row(
            str(index), result.scenario.name, result.scenario.description,
            Text(result.message, style=style),
        )
    console.print(table)

    passed = sum(1 for r in results if r.passed)
    failed = len(results) - passed
    parts = [f"[bold]{len(results)}[/bold] scenarios"]
    if passed:
        parts.append(f"[green]{passed} passed[/green]")
    if failed:
        parts.append(f"[red]{failed} failed[/red]")
    console.print(" | ".join(parts))


def print_consistency_report(report: ConsistencyReport) -> None:
    """Print a consistency report with any stale products."""
    if report.ok:
        console.print(Panel(f"[bold green]{report.message}[/bold green]", title="Consistency"))
        return

    console.print(Panel(f"[bold red]{report.message}[/bold red]", title="Consistency"))
    if report.stale:
        table = Table(title="Stale Products", show_header=True)
        table.add_column("Product", style="bold")
        table.add_column("Stored")
        table.add_column("Derived")
        for pid, (stored, derived) in report.stale.items():
            table.add_row(pid, _specs(stored), _specs(derived))
        console.print(table)


def report_to_json(report: ConsistencyReport) -> dict[str, Any]:
    """Convert a ConsistencyReport to a JSON-serializable dict."""
    return {
        "ok": report.ok,
        "message": report.message,
        "stale": {
            pid: {"stored": sorted(stored), "derived": sorted(derived)}
            for pid, (stored, derived) in report.stale.items()
        },
        "snapshot_matches": report.snapshot_matches,
    }


def admission_to_json(admission: Admission) -> dict[str, Any]:
    """Convert an Admission to a JSON-serializable dict."""
    return {
        "accepted": admission.accepted,
        "product": admission.product_id,
        "version": admission.version_id,
        "disallowed": sorted(admission.disallowed),
        "committed": list(admission.committed),
    }
