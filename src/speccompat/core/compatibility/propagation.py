"""Compatibility commit and cascade.

Committing a product's compatible set invalidates every product that
(transitively) depends on it. The cascade is an explicit worklist rather
than recursion:

1. **Discovery** -- breadth-first search over reverse dependency edges
   from the committed product collects the affected products. Products
   already in ``visited`` are excluded.
2. **Ordering** -- affected products are processed in topological order
   of the dependency edges among them (Kahn's algorithm), so in an acyclic
   cascade every product is recomputed after all of its affected
   dependencies.
3. **Cycles** -- when only cycle members remain, the earliest discovered
   one is processed next and reads its cycle peers as currently stored.
   Cycles are skipped, not solved: a caller resolves one by removing the
   cycle and re-issuing the affected version update.

Loop invariant: a product enters ``visited`` exactly when it is committed,
and a product in ``visited`` is never committed again in the same call.
Hence every product is committed at most once per top-level commit and the
cascade terminates on any graph, costing O(versions + edges) beyond the
derivations themselves.
"""

from __future__ import annotations

import logging
from collections import defaultdict, deque
from collections.abc import Iterable

from speccompat.core.compatibility.engine import derive_compatibility
from speccompat.core.store import CompatibilityStore

logger = logging.getLogger(__name__)


def _reverse_dependencies(store: CompatibilityStore) -> dict[str, list[str]]:
    """Map each product to the products owning a version that depends on it.

    Dependents are listed once each, in version scan order.
    """
    reverse: dict[str, dict[str, None]] = defaultdict(dict)
    for version in store.versions.values():
        for dep in version.dependencies:
            reverse[dep].setdefault(version.product, None)
    return {dep: list(owners) for dep, owners in reverse.items()}


def affected_products(
    store: CompatibilityStore,
    product_id: str,
    visited: Iterable[str] = (),
) -> list[str]:
    """Return products transitively depending on ``product_id``, in BFS order.

    The root and anything in ``visited`` are excluded.
    """
    reverse = _reverse_dependencies(store)
    excluded = set(visited)
    excluded.add(product_id)

    found: dict[str, None] = {}
    queue: deque[str] = deque([product_id])
    while queue:
        current = queue.popleft()
        for dependent in reverse.get(current, ()):
            if dependent not in excluded and dependent not in found:
                found[dependent] = None
                queue.append(dependent)
    return list(found)


def commit_compatibility(
    store: CompatibilityStore,
    product_id: str,
    new_set: Iterable[str],
    visited: set[str] | None = None,
) -> list[str]:
    """Store ``new_set`` for a product and cascade to its dependents.

    Args:
        store: The store to mutate.
        product_id: The product whose compatibility was recomputed.
        new_set: Its new compatible set. Not validated here.
        visited: Products already committed in this call chain. Updated in
            place; pass a shared set to chain several commits under one
            guard.

    Returns:
        The committed product ids, root first, in commit order.
    """
    if visited is None:
        visited = set()

    store.set_compatible(product_id, new_set)
    visited.add(product_id)
    committed = [product_id]
    logger.debug("Committed %s: %s", product_id, sorted(new_set))

    affected = affected_products(store, product_id, visited)
    if not affected:
        return committed

    # In-degrees over dependency edges restricted to the affected set.
    members = set(affected)
    waiting_on: dict[str, set[str]] = {}
    dependents: dict[str, list[str]] = {pid: [] for pid in affected}
    for pid in affected:
        deps = {
            dep
            for version in store.versions_of(pid)
            for dep in version.dependencies
            if dep in members and dep != pid
        }
        waiting_on[pid] = deps
        for dep in deps:
            dependents[dep].append(pid)

    remaining: dict[str, None] = dict.fromkeys(affected)
    ready: deque[str] = deque(pid for pid in affected if not waiting_on[pid])
    queued = set(ready)

    while remaining:
        if ready:
            current = ready.popleft()
        else:
            current = next(iter(remaining))
            logger.debug(
                "Dependency cycle among %s; committing %s against stored values",
                list(remaining), current,
            )
        del remaining[current]

        derived = derive_compatibility(store, current)
        logger.debug(
            "Recomputed %s after %s changed: %s (was %s)",
            current, product_id, sorted(derived),
            sorted(store.get_product(current).compatible),
        )
        store.set_compatible(current, derived)
        visited.add(current)
        committed.append(current)

        for dependent in dependents[current]:
            waiting_on[dependent].discard(current)
            if (
                not waiting_on[dependent]
                and dependent in remaining
                and dependent not in queued
            ):
                ready.append(dependent)
                queued.add(dependent)

    return committed
