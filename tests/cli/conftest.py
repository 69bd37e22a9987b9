"""Shared fixtures for CLI tests.

Provides a Click runner and temporary plan and snapshot files.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CliRunner for invoking commands."""
    return CliRunner()


@pytest.fixture
def clean_plan(tmp_path: Path) -> Path:
    """A plan whose every version is admitted."""
    plan = tmp_path / "plan.yaml"
    plan.write_text(
        "products: [core, plugin]\n"
        "steps:\n"
        "  - product: core\n"
        "    name: core-1\n"
        "    supports: [spec1, spec2]\n"
        "  - product: plugin\n"
        "    supports: [spec1, spec2]\n"
        "    depends_on: [core]\n"
        "  - update: core-1\n"
        "    supports: [spec1]\n"
    )
    return plan


@pytest.fixture
def rejecting_plan(tmp_path: Path) -> Path:
    """A plan whose second version asks for a spec its dependency lacks."""
    plan = tmp_path / "rejecting.yaml"
    plan.write_text(
        "products: [core, plugin]\n"
        "steps:\n"
        "  - product: core\n"
        "    supports: [spec1]\n"
        "  - product: plugin\n"
        "    supports: [spec1, spec2]\n"
        "    depends_on: [core]\n"
    )
    return plan


@pytest.fixture
def invalid_plan(tmp_path: Path) -> Path:
    """A plan referencing an undeclared product."""
    plan = tmp_path / "invalid.yaml"
    plan.write_text("products: [core]\nsteps:\n  - product: ghost\n")
    return plan


@pytest.fixture
def consistent_snapshot(tmp_path: Path) -> Path:
    """A snapshot whose stored compatibility is up to date."""
    data = {
        "products": {
            "p0": {"compatible": ["spec1"], "versions": ["v0"]},
            "p1": {"compatible": ["spec1"], "versions": ["v1"]},
        },
        "versions": {
            "v0": {"product": "p0", "supports": ["spec1"], "dependencies": []},
            "v1": {"product": "p1", "supports": ["spec1", "spec2"], "dependencies": ["p0"]},
        },
    }
    path = tmp_path / "store.json"
    path.write_text(json.dumps(data))
    return path


@pytest.fixture
def stale_snapshot(tmp_path: Path) -> Path:
    """A snapshot where p1 still claims spec2 after p0 dropped it."""
    data = {
        "products": {
            "p0": {"compatible": ["spec1"], "versions": ["v0"]},
            "p1": {"compatible": ["spec1", "spec2"], "versions": ["v1"]},
        },
        "versions": {
            "v0": {"product": "p0", "supports": ["spec1"], "dependencies": []},
            "v1": {"product": "p1", "supports": ["spec1", "spec2"], "dependencies": ["p0"]},
        },
    }
    path = tmp_path / "stale.json"
    path.write_text(json.dumps(data))
    return path
