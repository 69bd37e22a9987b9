"""``speccompat scenarios [NAME...]`` — Run the built-in acceptance scenarios.

Each scenario builds a fresh store through the public operations and is
audited by the consistency oracle against its expected snapshot.

Exit Codes:
    0 — Every selected scenario passed.
    1 — One or more scenarios failed.
    2 — An unknown scenario name was requested.
"""

from __future__ import annotations

import json
import sys

import click

from speccompat.cli.output import configure_logging
from speccompat.harness import SCENARIOS, ScenarioResult, run_scenarios


def _result_to_json(result: ScenarioResult) -> dict:
    return {
        "name": result.scenario.name,
        "description": result.scenario.description,
        "passed": result.passed,
        "message": result.message,
        "snapshot": result.snapshot,
    }


@click.command("scenarios")
@click.argument("names", nargs=-1)
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
@click.option("--verbose", "-v", is_flag=True, help="Trace the compatibility cascade.")
def scenarios_command(names: tuple[str, ...], output_format: str, verbose: bool) -> None:
    """Run the built-in compatibility scenarios.

    Runs every scenario, or only those named in NAMES.

    Exit code 0 if all pass, 1 if any fail, 2 for an unknown name.
    """
    configure_logging(verbose)

    known = {s.name for s in SCENARIOS}
    unknown = [n for n in names if n not in known]
    if unknown:
        click.echo(
            f"Error: Unknown scenario(s): {', '.join(unknown)}. "
            f"Available: {', '.join(sorted(known))}"
        )
        sys.exit(2)

    results = run_scenarios(names)

    if output_format == "json":
        click.echo(json.dumps([_result_to_json(r) for r in results], indent=2))
    else:
        from speccompat.cli.output import print_scenario_results
        print_scenario_results(results)

    sys.exit(0 if all(r.passed for r in results) else 1)
