"""In-memory Product/Version store.

The ``CompatibilityStore`` owns the two record maps and the identifier
counters. Each instance is independent, so tests and scenarios can run
against isolated stores.

Thread safety: This class is NOT thread-safe. The compatibility cascade
reads and writes many records per call and assumes a single writer.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from speccompat.core.store.models import Product, Version
from speccompat.exceptions import UnknownProductError, UnknownVersionError

PRODUCT_ID_PREFIX: str = "p"
VERSION_ID_PREFIX: str = "v"


class CompatibilityStore:
    """Key-value store for Product and Version records.

    Records are kept in insertion order. Scans over ``versions`` therefore
    follow version creation order, which in turn fixes the cascade
    discovery order.

    Example::

        store = CompatibilityStore()
        pid = store.create_product()
        store.get_product(pid).compatible   # set()
    """

    def __init__(self) -> None:
        self._products: dict[str, Product] = {}
        self._versions: dict[str, Version] = {}
        self._next_product = 0
        self._next_version = 0

    # -- Identifiers --------------------------------------------------------

    def new_version_id(self) -> str:
        """Consume and return a fresh version identifier.

        Only call this once a version is known to be admitted; rejected
        puts must not consume identifiers. Identifiers already taken by
        caller-supplied versions are skipped.
        """
        while True:
            vid = f"{VERSION_ID_PREFIX}{self._next_version}"
            self._next_version += 1
            if vid not in self._versions:
                return vid

    # -- Products -----------------------------------------------------------

    def create_product(self) -> str:
        """Create an empty product and return its identifier."""
        while True:
            pid = f"{PRODUCT_ID_PREFIX}{self._next_product}"
            self._next_product += 1
            if pid not in self._products:
                break
        self._products[pid] = Product(product_id=pid)
        return pid

    def has_product(self, product_id: str) -> bool:
        return product_id in self._products

    def get_product(self, product_id: str) -> Product:
        """Return the product record.

        Raises:
            UnknownProductError: If the product does not exist.
        """
        try:
            return self._products[product_id]
        except KeyError:
            raise UnknownProductError(product_id) from None

    def require_products(self, product_ids: Iterable[str]) -> None:
        """Fail fast if any of ``product_ids`` is missing from the store."""
        for pid in product_ids:
            if pid not in self._products:
                raise UnknownProductError(pid)

    def set_compatible(self, product_id: str, specs: Iterable[str]) -> None:
        """Overwrite the cached compatible set of a product."""
        self.get_product(product_id).compatible = set(specs)

    @property
    def products(self) -> Mapping[str, Product]:
        """Read-only view of all products, in creation order."""
        return MappingProxyType(self._products)

    # -- Versions -----------------------------------------------------------

    def has_version(self, version_id: str) -> bool:
        return version_id in self._versions

    def get_version(self, version_id: str) -> Version:
        """Return the version record.

        Raises:
            UnknownVersionError: If the version does not exist.
        """
        try:
            return self._versions[version_id]
        except KeyError:
            raise UnknownVersionError(version_id) from None

    def put_version_record(
        self,
        version_id: str,
        product_id: str,
        supports: Iterable[str],
        dependencies: Iterable[str],
    ) -> Version:
        """Write a version record, appending it to its product if new.

        An existing record is replaced wholesale; its slot in the owning
        product's ``versions`` list is kept. No validation is performed
        here; the admission gate owns the checks.

        Returns:
            The stored ``Version``.
        """
        product = self.get_product(product_id)
        version = Version(
            version_id=version_id,
            product=product_id,
            supports=set(supports),
            dependencies=list(dependencies),
        )
        if version_id not in self._versions:
            product.versions.append(version_id)
        self._versions[version_id] = version
        return version

    @property
    def versions(self) -> Mapping[str, Version]:
        """Read-only view of all versions, in creation order."""
        return MappingProxyType(self._versions)

    def versions_of(self, product_id: str) -> list[Version]:
        """Return the version records owned by a product, in order."""
        return [self._versions[vid] for vid in self.get_product(product_id).versions]

    def dependents_of(self, product_id: str) -> list[str]:
        """Return products owning a version that depends on ``product_id``.

        Each product appears once, in the order its first matching version
        is found while scanning every version in the store.
        """
        seen: dict[str, None] = {}
        for version in self._versions.values():
            if version.depends_on(product_id):
                seen.setdefault(version.product, None)
        return list(seen)

    # -- Lifecycle ----------------------------------------------------------

    def reset(self) -> None:
        """Drop all records and restart identifier generation at zero."""
        self._products.clear()
        self._versions.clear()
        self._next_product = 0
        self._next_version = 0

    def _restore(
        self,
        products: dict[str, Product],
        versions: dict[str, Version],
    ) -> None:
        """Replace all state with the given records (used by snapshot loading)."""
        self._products = products
        self._versions = versions
        self._next_product = _next_counter(products, PRODUCT_ID_PREFIX)
        self._next_version = _next_counter(versions, VERSION_ID_PREFIX)

    def __len__(self) -> int:
        return len(self._products)

    def __repr__(self) -> str:
        return (
            f"CompatibilityStore(products={len(self._products)}, "
            f"versions={len(self._versions)})"
        )


def _next_counter(ids: Iterable[str], prefix: str) -> int:
    """Return one past the highest numeric suffix among ``prefix``-ids."""
    highest = -1
    for ident in ids:
        suffix = ident[len(prefix):]
        if ident.startswith(prefix) and suffix.isdigit():
            highest = max(highest, int(suffix))
    return highest + 1
