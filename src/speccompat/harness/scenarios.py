"""Built-in acceptance scenarios.

Each scenario builds state on a fresh ``CompatibilityStore`` through the
public operations and declares the snapshot the store must end in. A
scenario passes when the consistency oracle reports no stale product and
the snapshot matches.

The scenarios use the default four-spec vocabulary ``spec1`` .. ``spec4``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from speccompat.core.compatibility import (
    ConsistencyReport,
    check_consistency,
    create_product,
    put_version,
)
from speccompat.core.store import CompatibilityStore

SPEC_V1 = "spec1"
SPEC_V2 = "spec2"
SPEC_V3 = "spec3"
SPEC_V4 = "spec4"

DEFAULT_SPECS: tuple[str, ...] = (SPEC_V1, SPEC_V2, SPEC_V3, SPEC_V4)


@dataclass(frozen=True)
class Scenario:
    """A named store-building routine plus its expected end state."""

    name: str
    description: str
    build: Callable[[CompatibilityStore], object]
    expected: dict[str, Any]


@dataclass
class ScenarioResult:
    """Outcome of running one scenario."""

    scenario: Scenario
    report: ConsistencyReport
    snapshot: dict[str, Any] = field(default_factory=dict)

    @property
    def passed(self) -> bool:
        return self.report.ok

    @property
    def message(self) -> str:
        return self.report.message


def _product(compatible: Iterable[str], versions: Iterable[str]) -> dict[str, list[str]]:
    return {"compatible": list(compatible), "versions": list(versions)}


def _version(
    product: str, supports: Iterable[str], dependencies: Iterable[str] = ()
) -> dict[str, Any]:
    return {
        "product": product,
        "supports": list(supports),
        "dependencies": list(dependencies),
    }


# ---------------------------------------------------------------------------
# Scenario bodies
# ---------------------------------------------------------------------------


def _single_version(store: CompatibilityStore) -> None:
    put_version(store, create_product(store), None, [SPEC_V1], [])


def _rejected_dependency(store: CompatibilityStore) -> None:
    base = create_product(store)
    dependent = create_product(store)
    put_version(store, base, None, [SPEC_V1], [])
    put_version(store, dependent, None, [SPEC_V1, SPEC_V2], [base])


def _depends_on_product(store: CompatibilityStore) -> str:
    base = create_product(store)
    dependent = create_product(store)
    put_version(store, base, None, [SPEC_V1, SPEC_V2], [])
    put_version(store, dependent, None, [SPEC_V1, SPEC_V2], [base])
    return base


def _dependency_gains_specs(store: CompatibilityStore) -> None:
    base = _depends_on_product(store)
    put_version(store, base, None, [SPEC_V3, SPEC_V4], [])


def _cycle_by_update(store: CompatibilityStore) -> None:
    first = create_product(store)
    second = create_product(store)
    vid = put_version(store, first, None, [SPEC_V1], []).raise_for_rejection()
    put_version(store, second, None, [SPEC_V1], [first])
    put_version(store, first, vid, [SPEC_V1], [second])


def _dependency_drops_spec(store: CompatibilityStore) -> None:
    base = create_product(store)
    dependent = create_product(store)
    vid = put_version(store, base, None, [SPEC_V1, SPEC_V2], []).raise_for_rejection()
    put_version(store, dependent, None, [SPEC_V1, SPEC_V2], [base])
    put_version(store, base, vid, [SPEC_V1], [])


def _dependency_recovers_spec(store: CompatibilityStore) -> None:
    base = create_product(store)
    dependent = create_product(store)
    vid = put_version(store, base, None, [SPEC_V1, SPEC_V2], []).raise_for_rejection()
    put_version(store, dependent, None, [SPEC_V1, SPEC_V2], [base])
    put_version(store, base, vid, [SPEC_V1], [])
    put_version(store, base, vid, [SPEC_V1, SPEC_V2], [])


def _multi_version_dependency(store: CompatibilityStore) -> None:
    base = create_product(store)
    for spec in DEFAULT_SPECS:
        put_version(store, base, None, [spec], [])
    dependent = create_product(store)
    put_version(store, dependent, None, list(DEFAULT_SPECS), [base])


def _multi_version_dependency_drop(store: CompatibilityStore) -> None:
    base = create_product(store)
    put_version(store, base, None, [SPEC_V1], [])
    put_version(store, base, None, [SPEC_V2], [])
    vid = put_version(store, base, None, [SPEC_V3], []).raise_for_rejection()
    put_version(store, base, None, [SPEC_V4], [])
    dependent = create_product(store)
    put_version(store, dependent, None, list(DEFAULT_SPECS), [base])
    put_version(store, base, vid, [SPEC_V1], [])


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

SCENARIOS: tuple[Scenario, ...] = (
    Scenario(
        name="single-version",
        description="A product with a version can be created.",
        build=_single_version,
        expected={
            "products": {"p0": _product([SPEC_V1], ["v0"])},
            "versions": {"v0": _version("p0", [SPEC_V1])},
        },
    ),
    Scenario(
        name="rejected-dependency",
        description=(
            "A version cannot be created with a dependency that does not "
            "support all desired specs."
        ),
        build=_rejected_dependency,
        expected={
            "products": {
                "p0": _product([SPEC_V1], ["v0"]),
                "p1": _product([], []),
            },
            "versions": {"v0": _version("p0", [SPEC_V1])},
        },
    ),
    Scenario(
        name="depends-on-product",
        description="A version can depend on another product.",
        build=_depends_on_product,
        expected={
            "products": {
                "p0": _product([SPEC_V1, SPEC_V2], ["v0"]),
                "p1": _product([SPEC_V1, SPEC_V2], ["v1"]),
            },
            "versions": {
                "v0": _version("p0", [SPEC_V1, SPEC_V2]),
                "v1": _version("p1", [SPEC_V1, SPEC_V2], ["p0"]),
            },
        },
    ),
    Scenario(
        name="dependency-gains-specs",
        description="A dependency adding additional spec support does not change the dependent.",
        build=_dependency_gains_specs,
        expected={
            "products": {
                "p0": _product(DEFAULT_SPECS, ["v0", "v2"]),
                "p1": _product([SPEC_V1, SPEC_V2], ["v1"]),
            },
            "versions": {
                "v0": _version("p0", [SPEC_V1, SPEC_V2]),
                "v1": _version("p1", [SPEC_V1, SPEC_V2], ["p0"]),
                "v2": _version("p0", [SPEC_V3, SPEC_V4]),
            },
        },
    ),
    Scenario(
        name="cycle-by-update",
        description="Circular dependencies are resolvable through manual updates.",
        build=_cycle_by_update,
        expected={
            "products": {
                "p0": _product([SPEC_V1], ["v0"]),
                "p1": _product([SPEC_V1], ["v1"]),
            },
            "versions": {
                "v0": _version("p0", [SPEC_V1], ["p1"]),
                "v1": _version("p1", [SPEC_V1], ["p0"]),
            },
        },
    ),
    Scenario(
        name="dependency-drops-spec",
        description=(
            "A product's compatibility always matches what its dependencies "
            "and versions support."
        ),
        build=_dependency_drops_spec,
        expected={
            "products": {
                "p0": _product([SPEC_V1], ["v0"]),
                "p1": _product([SPEC_V1], ["v1"]),
            },
            "versions": {
                "v0": _version("p0", [SPEC_V1]),
                "v1": _version("p1", [SPEC_V1, SPEC_V2], ["p0"]),
            },
        },
    ),
    Scenario(
        name="dependency-recovers-spec",
        description="A product's support recovers when its dependencies recover theirs.",
        build=_dependency_recovers_spec,
        expected={
            "products": {
                "p0": _product([SPEC_V1, SPEC_V2], ["v0"]),
                "p1": _product([SPEC_V1, SPEC_V2], ["v1"]),
            },
            "versions": {
                "v0": _version("p0", [SPEC_V1, SPEC_V2]),
                "v1": _version("p1", [SPEC_V1, SPEC_V2], ["p0"]),
            },
        },
    ),
    Scenario(
        name="multi-version-dependency",
        description=(
            "A product whose versions cover different specs can be depended "
            "on for all of them."
        ),
        build=_multi_version_dependency,
        expected={
            "products": {
                "p0": _product(DEFAULT_SPECS, ["v0", "v1", "v2", "v3"]),
                "p1": _product(DEFAULT_SPECS, ["v4"]),
            },
            "versions": {
                "v0": _version("p0", [SPEC_V1]),
                "v1": _version("p0", [SPEC_V2]),
                "v2": _version("p0", [SPEC_V3]),
                "v3": _version("p0", [SPEC_V4]),
                "v4": _version("p1", DEFAULT_SPECS, ["p0"]),
            },
        },
    ),
    Scenario(
        name="multi-version-dependency-drop",
        description="A spec missing from a dependency is removed from the dependent.",
        build=_multi_version_dependency_drop,
        expected={
            "products": {
                "p0": _product([SPEC_V1, SPEC_V2, SPEC_V4], ["v0", "v1", "v2", "v3"]),
                "p1": _product([SPEC_V1, SPEC_V2, SPEC_V4], ["v4"]),
            },
            "versions": {
                "v0": _version("p0", [SPEC_V1]),
                "v1": _version("p0", [SPEC_V2]),
                "v2": _version("p0", [SPEC_V1]),
                "v3": _version("p0", [SPEC_V4]),
                "v4": _version("p1", DEFAULT_SPECS, ["p0"]),
            },
        },
    ),
)


def get_scenario(name: str) -> Scenario:
    """Look up a built-in scenario by name.

    Raises:
        KeyError: If no scenario has that name.
    """
    for scenario in SCENARIOS:
        if scenario.name == name:
            return scenario
    raise KeyError(name)


def run_scenario(scenario: Scenario) -> ScenarioResult:
    """Run one scenario against a fresh store and audit the result."""
    store = CompatibilityStore()
    scenario.build(store)
    report = check_consistency(store, scenario.expected)
    return ScenarioResult(scenario=scenario, report=report, snapshot=store.to_dict())


def run_scenarios(names: Iterable[str] | None = None) -> list[ScenarioResult]:
    """Run the named scenarios (all of them by default), in order.

    Raises:
        KeyError: If a requested name is unknown.
    """
    selected = SCENARIOS if not names else tuple(get_scenario(n) for n in names)
    return [run_scenario(scenario) for scenario in selected]
