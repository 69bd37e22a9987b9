"""speccompat exception hierarchy.

All public exceptions inherit from SpecCompatError, giving callers a single
base class to catch when they want to handle any speccompat-specific failure
without swallowing unrelated errors.

An inadmissible version is normally reported as a rejected ``Admission``
value, not an exception. ``InadmissibleVersionError`` exists for callers that
explicitly opt into exceptions via ``Admission.raise_for_rejection()``.
"""

from __future__ import annotations


class SpecCompatError(Exception):
    """Base exception for all speccompat errors."""


class UnknownProductError(SpecCompatError, KeyError):
    """Raised when a product identifier is not present in the store.

    Covers dangling dependency references and version puts against a
    product that was never created.
    """

    def __init__(self, product_id: str) -> None:
        super().__init__(product_id)
        self.product_id = product_id

    def __str__(self) -> str:
        return f"Unknown product: {self.product_id!r}"


class UnknownVersionError(SpecCompatError, KeyError):
    """Raised when a version identifier is not present in the store."""

    def __init__(self, version_id: str) -> None:
        super().__init__(version_id)
        self.version_id = version_id

    def __str__(self) -> str:
        return f"Unknown version: {self.version_id!r}"


class VersionOwnershipError(SpecCompatError):
    """Raised when a version update names a different owning product.

    A version's owning product is fixed at creation.
    """


class SelfDependencyError(SpecCompatError):
    """Raised when a version lists its own product as a dependency."""


class InadmissibleVersionError(SpecCompatError):
    """Raised when a rejected admission is converted into an exception.

    Carries the specs the version's dependencies do not currently allow.
    """

    def __init__(self, product_id: str, disallowed: frozenset[str]) -> None:
        self.product_id = product_id
        self.disallowed = disallowed
        super().__init__(
            f"Version of {product_id!r} cannot support "
            f"{sorted(disallowed)}: dependencies do not allow them"
        )


class ConsistencyError(SpecCompatError):
    """Raised when stored compatibility diverges from derived compatibility.

    Also covers a store snapshot that differs from the expected snapshot.
    """


class SnapshotError(SpecCompatError):
    """Raised when a store snapshot cannot be read or decoded.

    Covers unreadable files, invalid JSON/YAML, and documents that do not
    match the snapshot schema.
    """


class PlanError(SpecCompatError):
    """Raised when a plan file is malformed or references unknown aliases."""
