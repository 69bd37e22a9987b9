"""YAML plan files.

A plan names products by alias and lists version puts in order::

    specs: [spec1, spec2]          # optional closed vocabulary
    products: [core, plugin]
    steps:
      - product: core
        name: core-1               # optional alias for the version id
        supports: [spec1, spec2]
      - product: plugin
        supports: [spec1]
        depends_on: [core]
      - update: core-1             # re-put an existing version by alias
        supports: [spec1]

An ``update`` step targets the product that owns the aliased version; its
``product`` key may be omitted. Aliases are resolved when the plan is
loaded, so a plan that loads cleanly only fails at apply time through
ordinary admission rejections.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from speccompat.core.compatibility import Admission, create_product, put_version
from speccompat.core.store import CompatibilityStore
from speccompat.exceptions import PlanError

_STEP_KEYS = {"product", "name", "update", "supports", "depends_on"}


@dataclass(frozen=True)
class PlanStep:
    """One version put, expressed with aliases."""

    product: str
    supports: tuple[str, ...]
    depends_on: tuple[str, ...] = ()
    name: str | None = None
    update: str | None = None


@dataclass
class Plan:
    """A parsed plan: product aliases, ordered steps, optional vocabulary."""

    products: list[str]
    steps: list[PlanStep]
    specs: frozenset[str] | None = None


@dataclass
class PlanOutcome:
    """Result of applying a plan to a store.

    Attributes:
        store: The store the plan was applied to.
        product_ids: Product alias -> generated product id.
        version_ids: Version alias -> version id, for admitted named steps.
        admissions: One ``Admission`` per step, in order.
    """

    store: CompatibilityStore
    product_ids: dict[str, str] = field(default_factory=dict)
    version_ids: dict[str, str] = field(default_factory=dict)
    admissions: list[Admission] = field(default_factory=list)

    @property
    def rejected(self) -> list[tuple[int, Admission]]:
        """Return (step index, admission) for every rejected step."""
        return [(i, a) for i, a in enumerate(self.admissions) if not a.accepted]


def _string_list(value: Any, where: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise PlanError(f"{where} must be a list of strings")
    return value


def _optional_string(value: Any, where: str) -> str | None:
    if value is not None and not isinstance(value, str):
        raise PlanError(f"{where} must be a string")
    return value


def parse_plan(data: Any) -> Plan:
    """Validate a plan document and resolve its aliases.

    Raises:
        PlanError: On schema violations, duplicate or unknown aliases, or
            specs outside a declared vocabulary.
    """
    if not isinstance(data, dict):
        raise PlanError("Plan must be a mapping")

    vocabulary = None
    if "specs" in data:
        vocabulary = frozenset(_string_list(data["specs"], "specs"))

    products = _string_list(data.get("products"), "products")
    if len(set(products)) != len(products):
        raise PlanError("Product aliases must be unique")

    raw_steps = data.get("steps") or []
    if not isinstance(raw_steps, list):
        raise PlanError("steps must be a list")

    steps: list[PlanStep] = []
    version_owner: dict[str, str] = {}
    for index, raw in enumerate(raw_steps):
        where = f"steps[{index}]"
        if not isinstance(raw, dict):
            raise PlanError(f"{where} must be a mapping")
        unknown = set(raw) - _STEP_KEYS
        if unknown:
            raise PlanError(f"{where} has unknown keys: {sorted(unknown)}")

        update = _optional_string(raw.get("update"), f"{where}.update")
        if update is not None and update not in version_owner:
            raise PlanError(f"{where} updates unknown version alias {update!r}")

        product = _optional_string(raw.get("product"), f"{where}.product")
        if product is None and update is not None:
            product = version_owner[update]
        if product not in products:
            raise PlanError(f"{where} references unknown product {product!r}")
        if update is not None and version_owner[update] != product:
            raise PlanError(
                f"{where} updates {update!r}, which belongs to "
                f"{version_owner[update]!r}, not {product!r}"
            )

        supports = _string_list(raw.get("supports"), f"{where}.supports")
        depends_on = _string_list(raw.get("depends_on"), f"{where}.depends_on")
        for dep in depends_on:
            if dep not in products:
                raise PlanError(f"{where} depends on unknown product {dep!r}")
        if product in depends_on:
            raise PlanError(f"{where} makes {product!r} depend on itself")
        if vocabulary is not None:
            outside = set(supports) - vocabulary
            if outside:
                raise PlanError(f"{where} uses undeclared specs: {sorted(outside)}")

        name = _optional_string(raw.get("name"), f"{where}.name")
        if name is not None:
            if name in version_owner:
                raise PlanError(f"{where} redefines version alias {name!r}")
            version_owner[name] = product

        steps.append(
            PlanStep(
                product=product,
                supports=tuple(supports),
                depends_on=tuple(depends_on),
                name=name,
                update=update,
            )
        )

    return Plan(products=products, steps=steps, specs=vocabulary)


def load_plan(path: Path) -> Plan:
    """Read and parse a YAML (or JSON) plan file.

    Raises:
        PlanError: If the file cannot be read, is not valid YAML, or fails
            validation.
    """
    path = Path(path)
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        raise PlanError(f"Cannot read plan {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise PlanError(f"Invalid plan YAML in {path}: {exc}") from exc
    return parse_plan(data)


def apply_plan(plan: Plan, store: CompatibilityStore | None = None) -> PlanOutcome:
    """Create the plan's products and run its steps in order.

    Rejected steps are recorded and skipped. An update of a version whose
    creating step was rejected becomes a fresh version under its alias.
    """
    outcome = PlanOutcome(store=store if store is not None else CompatibilityStore())
    for alias in plan.products:
        outcome.product_ids[alias] = create_product(outcome.store)

    for step in plan.steps:
        version_id = outcome.version_ids.get(step.update) if step.update else None
        admission = put_version(
            outcome.store,
            outcome.product_ids[step.product],
            version_id,
            step.supports,
            [outcome.product_ids[dep] for dep in step.depends_on],
        )
        outcome.admissions.append(admission)
        if admission.accepted and step.name is not None:
            outcome.version_ids[step.name] = admission.version_id
        if admission.accepted and step.update is not None:
            outcome.version_ids.setdefault(step.update, admission.version_id)
    return outcome
