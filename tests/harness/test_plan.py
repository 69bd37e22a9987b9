"""Tests for YAML plan loading and application.

Verifies:
    - Valid plans load with aliases resolved.
    - Schema and alias errors raise PlanError.
    - Applying a plan creates products, admits and rejects versions, and
      re-puts aliased versions in place.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from speccompat.core.compatibility import check_consistency
from speccompat.exceptions import PlanError
from speccompat.harness import PlanStep, apply_plan, load_plan, parse_plan

PLAN_YAML = """\
specs: [spec1, spec2, spec3]
products: [core, plugin]
steps:
  - product: core
    name: core-1
    supports: [spec1, spec2]
  - product: plugin
    supports: [spec1, spec2]
    depends_on: [core]
  - update: core-1
    supports: [spec1]
"""


class TestLoadPlan:
    """Tests for reading and validating plan files."""

    def test_load_valid_plan(self, tmp_path: Path) -> None:
        path = tmp_path / "plan.yaml"
        path.write_text(PLAN_YAML)
        plan = load_plan(path)
        assert plan.products == ["core", "plugin"]
        assert plan.specs == {"spec1", "spec2", "spec3"}
        assert plan.steps[1] == PlanStep(
            product="plugin", supports=("spec1", "spec2"), depends_on=("core",)
        )

    def test_update_step_inherits_product(self, tmp_path: Path) -> None:
        path = tmp_path / "plan.yaml"
        path.write_text(PLAN_YAML)
        step = load_plan(path).steps[2]
        assert step.product == "core"
        assert step.update == "core-1"

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "plan.yaml"
        path.write_text("steps: [\n")
        with pytest.raises(PlanError, match="Invalid plan YAML"):
            load_plan(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(PlanError, match="Cannot read plan"):
            load_plan(tmp_path / "absent.yaml")

    @pytest.mark.parametrize(
        ("data", "message"),
        [
            (["not", "a", "mapping"], "must be a mapping"),
            ({"products": ["a", "a"]}, "unique"),
            ({"products": ["a"], "steps": [{"product": "b"}]}, "unknown product"),
            ({"products": ["a"], "steps": [{"product": "a", "depends_on": ["z"]}]}, "unknown product"),
            ({"products": ["a"], "steps": [{"product": "a", "depends_on": ["a"]}]}, "itself"),
            ({"products": ["a"], "steps": [{"update": "nope"}]}, "unknown version alias"),
            ({"products": ["a"], "steps": [{"product": "a", "update": ["x"]}]}, "update must be a string"),
            ({"products": ["a"], "steps": [{"product": ["a"]}]}, "product must be a string"),
            ({"products": ["a"], "steps": [{"product": "a", "name": ["x"]}]}, "name must be a string"),
            ({"products": ["a"], "steps": [{"product": "a", "bogus": 1}]}, "unknown keys"),
            ({"products": ["a"], "steps": [{"product": "a", "supports": "spec1"}]}, "list of strings"),
            ({"specs": ["spec1"], "products": ["a"], "steps": [{"product": "a", "supports": ["spec9"]}]}, "undeclared"),
            (
                {"products": ["a"], "steps": [
                    {"product": "a", "name": "x"}, {"product": "a", "name": "x"},
                ]},
                "redefines",
            ),
            (
                {"products": ["a", "b"], "steps": [
                    {"product": "a", "name": "x"}, {"product": "b", "update": "x"},
                ]},
                "belongs to",
            ),
        ],
    )
    def test_parse_errors(self, data, message: str) -> None:
        with pytest.raises(PlanError, match=message):
            parse_plan(data)


class TestApplyPlan:
    """Tests for running a plan against a store."""

    def test_apply_cascades_update(self, tmp_path: Path) -> None:
        path = tmp_path / "plan.yaml"
        path.write_text(PLAN_YAML)
        outcome = apply_plan(load_plan(path))

        assert outcome.product_ids == {"core": "p0", "plugin": "p1"}
        assert outcome.version_ids == {"core-1": "v0"}
        assert all(a.accepted for a in outcome.admissions)
        assert outcome.rejected == []
        assert outcome.store.get_product("p0").versions == ["v0"]
        assert outcome.store.get_product("p1").compatible == {"spec1"}
        assert check_consistency(outcome.store).ok

    def test_rejected_steps_are_recorded(self) -> None:
        plan = parse_plan({
            "products": ["core", "plugin"],
            "steps": [
                {"product": "core", "supports": ["spec1"]},
                {"product": "plugin", "supports": ["spec1", "spec2"], "depends_on": ["core"]},
            ],
        })
        outcome = apply_plan(plan)
        assert [i for i, _ in outcome.rejected] == [1]
        assert outcome.rejected[0][1].disallowed == {"spec2"}
        assert outcome.store.get_product("p1").versions == []

    def test_update_of_rejected_version_creates_it(self) -> None:
        plan = parse_plan({
            "products": ["core", "plugin"],
            "steps": [
                {"product": "core", "supports": ["spec1"]},
                {"product": "plugin", "name": "pl", "supports": ["spec2"], "depends_on": ["core"]},
                {"update": "pl", "supports": ["spec1"], "depends_on": ["core"]},
            ],
        })
        outcome = apply_plan(plan)
        assert outcome.admissions[1].rejected
        assert outcome.admissions[2].accepted
        assert outcome.version_ids["pl"] == outcome.admissions[2].version_id
        assert outcome.store.get_product("p1").compatible == {"spec1"}

    def test_empty_plan(self) -> None:
        outcome = apply_plan(parse_plan({}))
        assert outcome.admissions == []
        assert len(outcome.store) == 0
