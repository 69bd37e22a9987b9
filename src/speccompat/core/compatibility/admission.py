"""Version admission.

A version may only declare specs that every one of its dependency products
currently supports:

    allowed    = supports & compatible(D1) & ... & compatible(Dn)
    disallowed = supports - allowed

A non-empty ``disallowed`` rejects the put. Rejection is an ordinary,
expected outcome reported as an ``Admission`` value; the store is left
exactly as it was and no version identifier is consumed. Rejection is
deterministic, so retrying without changing inputs or store state yields
the same result.

Precondition violations (unknown products, foreign version ids,
self-dependencies) are programming errors and raise immediately.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import cast

from speccompat.core.compatibility.engine import allowed_specs, derive_compatibility
from speccompat.core.compatibility.propagation import commit_compatibility
from speccompat.core.store import CompatibilityStore
from speccompat.exceptions import (
    InadmissibleVersionError,
    SelfDependencyError,
    VersionOwnershipError,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Admission: the outcome of a version put
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Admission:
    """Result of a version put.

    Exactly one of two shapes:

    - accepted: ``version_id`` is the identifier used and ``committed``
      lists the products whose compatibility was recommitted.
    - rejected: ``version_id`` is None and ``disallowed`` names the specs
      the dependencies do not currently allow.

    Attributes:
        accepted: True if the version was stored.
        product_id: The owning product of the put.
        version_id: The stored version identifier, or None when rejected.
        disallowed: Specs rejected by the dependencies. Empty when accepted.
        allowed: Specs the dependencies would have allowed.
        committed: Product ids recommitted by the cascade, root first.
    """

    accepted: bool
    product_id: str
    version_id: str | None = None
    disallowed: frozenset[str] = field(default_factory=frozenset)
    allowed: frozenset[str] = field(default_factory=frozenset)
    committed: tuple[str, ...] = ()

    @classmethod
    def accept(
        cls,
        product_id: str,
        version_id: str,
        allowed: frozenset[str],
        committed: Iterable[str],
    ) -> Admission:
        return cls(
            accepted=True,
            product_id=product_id,
            version_id=version_id,
            allowed=allowed,
            committed=tuple(committed),
        )

    @classmethod
    def reject(
        cls,
        product_id: str,
        disallowed: frozenset[str],
        allowed: frozenset[str],
    ) -> Admission:
        return cls(
            accepted=False,
            product_id=product_id,
            disallowed=disallowed,
            allowed=allowed,
        )

    @property
    def rejected(self) -> bool:
        return not self.accepted

    def raise_for_rejection(self) -> str:
        """Return the version id, or raise if the put was rejected.

        Raises:
            InadmissibleVersionError: If the admission was rejected.
        """
        if not self.accepted:
            raise InadmissibleVersionError(self.product_id, self.disallowed)
        return cast(str, self.version_id)


# ---------------------------------------------------------------------------
# Store operations
# ---------------------------------------------------------------------------


def create_product(store: CompatibilityStore) -> str:
    """Create an empty product (no versions, empty compatible set)."""
    return store.create_product()


def _check_preconditions(
    store: CompatibilityStore,
    product_id: str,
    version_id: str | None,
    dependencies: list[str],
) -> None:
    store.require_products([product_id, *dependencies])
    if product_id in dependencies:
        raise SelfDependencyError(
            f"Version of {product_id!r} cannot depend on its own product"
        )
    if version_id is not None and store.has_version(version_id):
        owner = store.get_version(version_id).product
        if owner != product_id:
            raise VersionOwnershipError(
                f"Version {version_id!r} belongs to {owner!r}, "
                f"not {product_id!r}"
            )


def put_version(
    store: CompatibilityStore,
    product_id: str,
    version_id: str | None,
    supports: Iterable[str],
    dependencies: Iterable[str],
) -> Admission:
    """Create or update a version, then recompute and cascade compatibility.

    Args:
        store: The store to mutate.
        product_id: Owning product. Must exist.
        version_id: An existing version id to update in place, or None to
            create a version under a freshly generated id. A supplied id
            absent from the store is reserved as a fresh version.
        supports: Specs the version wants to support. Replaces any previous
            value wholesale.
        dependencies: Products the version depends on. Stored as given.

    Returns:
        An accepted ``Admission`` carrying the version id, or a rejected
        one carrying the disallowed specs.

    Raises:
        UnknownProductError: If the product or a dependency is missing.
        SelfDependencyError: If ``product_id`` is among ``dependencies``.
        VersionOwnershipError: If ``version_id`` belongs to another product.
    """
    supports = set(supports)
    dependencies = list(dependencies)
    _check_preconditions(store, product_id, version_id, dependencies)

    allowed = allowed_specs(store, supports, dependencies)
    disallowed = frozenset(supports - allowed)
    if disallowed:
        logger.info(
            "Rejected version %s of %s: dependencies %s do not allow %s",
            version_id or "<new>", product_id, dependencies, sorted(disallowed),
        )
        return Admission.reject(product_id, disallowed, allowed)

    vid = version_id if version_id is not None else store.new_version_id()
    store.put_version_record(vid, product_id, supports, dependencies)
    logger.debug(
        "Stored version %s of %s: supports %s, dependencies %s",
        vid, product_id, sorted(supports), dependencies,
    )

    committed = commit_compatibility(
        store, product_id, derive_compatibility(store, product_id)
    )
    return Admission.accept(product_id, vid, allowed, committed)
