"""Shared fixtures for speccompat tests."""

import pytest

from speccompat.core.compatibility import create_product, put_version
from speccompat.core.store import CompatibilityStore


@pytest.fixture
def store() -> CompatibilityStore:
    """Create an empty, isolated store."""
    return CompatibilityStore()


@pytest.fixture
def base_and_dependent(store: CompatibilityStore) -> tuple[str, str, str, str]:
    """Build p0 supporting {spec1, spec2} and p1 depending on it.

    Returns:
        (base product, dependent product, base version, dependent version)
    """
    base = create_product(store)
    dependent = create_product(store)
    base_version = put_version(store, base, None, ["spec1", "spec2"], []).version_id
    dep_version = put_version(
        store, dependent, None, ["spec1", "spec2"], [base]
    ).version_id
    return base, dependent, base_version, dep_version
