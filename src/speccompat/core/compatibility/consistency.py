"""Consistency oracle.

Audits a store in two ways:

- **Freshness:** every product's stored compatible set must equal a fresh
  derivation from its versions and its dependencies' stored sets.
- **Expected state:** optionally, the full store snapshot must equal an
  externally supplied snapshot (sets compared as sets, lists as lists).

Used as the acceptance oracle for scenarios and for auditing snapshots
loaded from disk.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from speccompat.core.compatibility.engine import derive_compatibility
from speccompat.core.store import CompatibilityStore, normalize_snapshot
from speccompat.exceptions import ConsistencyError

MSG_SUCCESS = "Success."
MSG_STALE = "Failed. Mismatch detected."
MSG_SNAPSHOT = "Failed. Expected db state does not match the actual state."


@dataclass
class ConsistencyReport:
    """Outcome of a consistency check.

    Attributes:
        stale: Product id -> (stored, derived) for every product whose
            cached compatible set differs from a fresh derivation.
        snapshot_matches: Whether the store equals the expected snapshot,
            or None when no snapshot was supplied.
    """

    stale: dict[str, tuple[frozenset[str], frozenset[str]]] = field(
        default_factory=dict
    )
    snapshot_matches: bool | None = None

    @property
    def ok(self) -> bool:
        return not self.stale and self.snapshot_matches is not False

    @property
    def message(self) -> str:
        if self.stale:
            return MSG_STALE
        if self.snapshot_matches is False:
            return MSG_SNAPSHOT
        return MSG_SUCCESS


def snapshots_equal(actual: dict[str, Any], expected: dict[str, Any]) -> bool:
    """Compare two snapshot dicts with set semantics for spec fields."""
    return normalize_snapshot(actual) == normalize_snapshot(expected)


def check_consistency(
    store: CompatibilityStore,
    expected: dict[str, Any] | None = None,
) -> ConsistencyReport:
    """Check every product for staleness and optionally the full state.

    Args:
        store: The store to audit. Not modified.
        expected: Optional expected snapshot in ``to_dict()`` format.

    Returns:
        A ``ConsistencyReport``.

    Raises:
        SnapshotError: If ``expected`` is not shaped like a snapshot.
    """
    report = ConsistencyReport()
    for pid, product in store.products.items():
        derived = derive_compatibility(store, pid)
        if derived != product.compatible:
            report.stale[pid] = (frozenset(product.compatible), derived)

    if expected is not None:
        report.snapshot_matches = snapshots_equal(store.to_dict(), expected)
    return report


def assert_consistent(
    store: CompatibilityStore,
    expected: dict[str, Any] | None = None,
) -> None:
    """Raise if the store fails ``check_consistency``.

    Raises:
        ConsistencyError: With the report message and the stale products.
    """
    report = check_consistency(store, expected)
    if report.ok:
        return
    details = ", ".join(
        f"{pid} stored {sorted(stored)} derived {sorted(derived)}"
        for pid, (stored, derived) in report.stale.items()
    )
    raise ConsistencyError(f"{report.message} {details}".strip())
