"""Tests for the CompatibilityStore record management.

Validates product creation, identifier generation, version record writes,
dependent lookup, read-only views, and reset.
"""

from __future__ import annotations

import pytest

from speccompat.core.store import CompatibilityStore, Product, Version
from speccompat.exceptions import (
    SpecCompatError,
    UnknownProductError,
    UnknownVersionError,
)


class TestProducts:
    """Tests for product creation and lookup."""

    def test_create_product_is_empty(self) -> None:
        """A new product has no versions and an empty compatible set."""
        store = CompatibilityStore()
        pid = store.create_product()
        product = store.get_product(pid)
        assert product == Product(product_id=pid)
        assert product.compatible == set()
        assert product.versions == []

    def test_product_ids_are_sequential(self) -> None:
        store = CompatibilityStore()
        assert [store.create_product() for _ in range(3)] == ["p0", "p1", "p2"]

    def test_unknown_product_raises(self) -> None:
        """Missing products fail fast with a KeyError subclass."""
        store = CompatibilityStore()
        with pytest.raises(UnknownProductError) as exc_info:
            store.get_product("p9")
        assert isinstance(exc_info.value, KeyError)
        assert isinstance(exc_info.value, SpecCompatError)
        assert "p9" in str(exc_info.value)

    def test_require_products(self) -> None:
        store = CompatibilityStore()
        pid = store.create_product()
        store.require_products([pid])
        with pytest.raises(UnknownProductError):
            store.require_products([pid, "ghost"])

    def test_set_compatible_copies_input(self) -> None:
        store = CompatibilityStore()
        pid = store.create_product()
        specs = ["spec1", "spec2"]
        store.set_compatible(pid, specs)
        specs.append("spec3")
        assert store.get_product(pid).compatible == {"spec1", "spec2"}

    def test_products_view_is_read_only(self) -> None:
        store = CompatibilityStore()
        store.create_product()
        with pytest.raises(TypeError):
            store.products["p5"] = Product(product_id="p5")  # type: ignore[index]


class TestVersions:
    """Tests for version records and identifiers."""

    def test_new_version_ids_are_sequential(self) -> None:
        store = CompatibilityStore()
        assert store.new_version_id() == "v0"
        assert store.new_version_id() == "v1"

    def test_new_version_id_skips_taken_ids(self) -> None:
        """A caller-supplied id is never handed out again."""
        store = CompatibilityStore()
        pid = store.create_product()
        store.put_version_record("v0", pid, ["spec1"], [])
        assert store.new_version_id() == "v1"

    def test_put_new_record_appends_to_product(self) -> None:
        store = CompatibilityStore()
        pid = store.create_product()
        store.put_version_record("v0", pid, ["spec1"], [])
        store.put_version_record("v1", pid, ["spec2"], [])
        assert store.get_product(pid).versions == ["v0", "v1"]
        assert store.get_version("v1") == Version(
            version_id="v1", product=pid, supports={"spec2"}, dependencies=[]
        )

    def test_update_record_keeps_slot(self) -> None:
        """Re-putting an existing id replaces the record without appending."""
        store = CompatibilityStore()
        pid = store.create_product()
        store.put_version_record("v0", pid, ["spec1", "spec2"], [])
        store.put_version_record("v0", pid, ["spec1"], [])
        assert store.get_product(pid).versions == ["v0"]
        assert store.get_version("v0").supports == {"spec1"}

    def test_dependencies_stored_as_given(self) -> None:
        """Dependency order and duplicates are preserved."""
        store = CompatibilityStore()
        a = store.create_product()
        b = store.create_product()
        c = store.create_product()
        store.put_version_record("v0", c, [], [b, a, b])
        assert store.get_version("v0").dependencies == [b, a, b]

    def test_unknown_version_raises(self) -> None:
        store = CompatibilityStore()
        with pytest.raises(UnknownVersionError):
            store.get_version("v3")

    def test_versions_of(self) -> None:
        store = CompatibilityStore()
        pid = store.create_product()
        other = store.create_product()
        store.put_version_record("v0", pid, ["spec1"], [])
        store.put_version_record("v1", other, ["spec1"], [])
        store.put_version_record("v2", pid, ["spec2"], [])
        assert [v.version_id for v in store.versions_of(pid)] == ["v0", "v2"]


class TestDependents:
    """Tests for reverse dependency lookup."""

    def test_dependents_listed_once_in_scan_order(self) -> None:
        store = CompatibilityStore()
        base = store.create_product()
        first = store.create_product()
        second = store.create_product()
        store.put_version_record("v0", second, [], [base])
        store.put_version_record("v1", first, [], [base])
        store.put_version_record("v2", second, [], [base])
        assert store.dependents_of(base) == [second, first]

    def test_no_dependents(self) -> None:
        store = CompatibilityStore()
        base = store.create_product()
        assert store.dependents_of(base) == []


class TestReset:
    """Tests for clearing a store."""

    def test_reset_clears_records_and_counters(self) -> None:
        store = CompatibilityStore()
        pid = store.create_product()
        store.put_version_record(store.new_version_id(), pid, ["spec1"], [])
        store.reset()
        assert len(store) == 0
        assert dict(store.versions) == {}
        assert store.create_product() == "p0"
        assert store.new_version_id() == "v0"

    def test_stores_are_independent(self) -> None:
        first = CompatibilityStore()
        second = CompatibilityStore()
        first.create_product()
        assert len(first) == 1
        assert len(second) == 0
        assert second.create_product() == "p0"
