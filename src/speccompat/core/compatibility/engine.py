"""Compatibility derivation.

A product's compatible set is the union, over its versions, of each
version's contribution:

    contrib(V) = supports(V)                                  if deps(V) = {}
    contrib(V) = supports(V) & compatible(D1) & ... & compatible(Dn)   otherwise

    compatible(P) = contrib(V1) | contrib(V2) | ...

Derivation is one layer deep: dependency products contribute their
*stored* compatible sets. Keeping those up to date is the job of the
propagation cascade.
"""

from __future__ import annotations

from collections.abc import Iterable

from speccompat.core.store import CompatibilityStore


def allowed_specs(
    store: CompatibilityStore,
    supports: Iterable[str],
    dependencies: Iterable[str],
) -> frozenset[str]:
    """Intersect ``supports`` with the stored compatibility of each dependency.

    The fold is seeded with ``supports``, so an empty dependency list
    returns ``supports`` unchanged.

    Raises:
        UnknownProductError: If a dependency is not in the store.
    """
    allowed = set(supports)
    for dep in dependencies:
        allowed &= store.get_product(dep).compatible
    return frozenset(allowed)


def derive_compatibility(store: CompatibilityStore, product_id: str) -> frozenset[str]:
    """Compute a product's compatible-spec set from its versions.

    Read-only and deterministic: the same store state always yields the
    same set. A product without versions derives the empty set.

    Args:
        store: The store holding the product and its dependencies.
        product_id: The product to derive.

    Returns:
        The derived compatible set.

    Raises:
        UnknownProductError: If the product or a dependency is missing.
    """
    derived: set[str] = set()
    for version in store.versions_of(product_id):
        derived |= allowed_specs(store, version.supports, version.dependencies)
    return frozenset(derived)
