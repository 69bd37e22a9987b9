"""Store records — Product and Version.

Pure data holders with no business logic. Specs are opaque string tags:
only identity matters, so they are held in sets and compared with set
operations.
"""

from __future__ import annotations

from dataclasses import dataclass, field


# ---------------------------------------------------------------------------
# Product: an entity whose compatibility is derived from its versions
# ---------------------------------------------------------------------------


@dataclass
class Product:
    """A product record.

    Attributes:
        product_id: Generated, stable identifier (e.g., "p0").
        compatible: The last computed compatible-spec set. A cached value
            that must always equal a fresh derivation.
        versions: Version identifiers owned by this product, in insertion
            order. Append-only.
    """

    product_id: str
    compatible: set[str] = field(default_factory=set)
    versions: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Version: desired specs plus product-level dependencies
# ---------------------------------------------------------------------------


@dataclass
class Version:
    """A version record scoped under exactly one product.

    Attributes:
        version_id: Identifier of the version (e.g., "v0").
        product: Identifier of the owning product. Never changes.
        supports: Specs this version wants to support.
        dependencies: Product identifiers this version depends on, stored
            exactly as given.
    """

    version_id: str
    product: str
    supports: set[str] = field(default_factory=set)
    dependencies: list[str] = field(default_factory=list)

    @property
    def has_dependencies(self) -> bool:
        """Return True if the version depends on at least one product."""
        return len(self.dependencies) > 0

    def depends_on(self, product_id: str) -> bool:
        """Return True if ``product_id`` appears in the dependency list."""
        return product_id in self.dependencies
