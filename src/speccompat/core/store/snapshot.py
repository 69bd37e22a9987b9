"""Store snapshots --- serialization, deserialization, and comparison.

This module extends ``CompatibilityStore`` (defined in ``store.py``) with:

- **Serialization:** ``to_dict``, ``to_json``, ``write`` (disk).
- **Deserialization:** ``from_dict``, ``from_json``, ``read`` (disk).

They are attached to the class in ``__init__.py``. The snapshot is also the
shape of the "expected state" consumed by the consistency oracle, so
``normalize_snapshot`` is public.

Snapshot schema::

    {
      "products": {"p0": {"compatible": ["spec1"], "versions": ["v0"]}},
      "versions": {"v0": {"product": "p0", "supports": ["spec1"],
                          "dependencies": []}}
    }

Determinism guarantee: sets are emitted sorted and records are emitted in
store insertion order, so equal stores produce byte-identical output.
Files ending in ``.yaml`` or ``.yml`` are read and written as YAML, anything
else as JSON.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from speccompat.core.store.models import Product, Version
from speccompat.exceptions import SnapshotError

_YAML_SUFFIXES = (".yaml", ".yml")


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def _to_dict(self: Any) -> dict[str, Any]:
    """Serialize the store to a plain, deterministic dict."""
    return {
        "products": {
            pid: {
                "compatible": sorted(product.compatible),
                "versions": list(product.versions),
            }
            for pid, product in self.products.items()
        },
        "versions": {
            vid: {
                "product": version.product,
                "supports": sorted(version.supports),
                "dependencies": list(version.dependencies),
            }
            for vid, version in self.versions.items()
        },
    }


def _to_json(self: Any) -> str:
    """Serialize the store to a JSON string (2-space indent)."""
    return json.dumps(self.to_dict(), indent=2) + "\n"


def _write(self: Any, path: Path) -> None:
    """Write the snapshot to disk as JSON or YAML depending on suffix.

    Args:
        path: Destination file. Parent directories must exist.
    """
    path = Path(path)
    if path.suffix.lower() in _YAML_SUFFIXES:
        text = yaml.safe_dump(self.to_dict(), sort_keys=False)
    else:
        text = self.to_json()
    path.write_text(text, encoding="utf-8")


# ---------------------------------------------------------------------------
# Deserialization
# ---------------------------------------------------------------------------


def _str_list(value: Any, where: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise SnapshotError(f"{where} must be a list of strings")
    return list(value)


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    section = data.get(key) or {}
    if not isinstance(section, dict):
        raise SnapshotError(f"'{key}' must be a mapping")
    for ident, entry in section.items():
        if not isinstance(entry, dict):
            raise SnapshotError(f"{key}[{ident!r}] must be a mapping")
    return section


def _check_document(data: Any) -> None:
    """Check the shape of a snapshot document without resolving references.

    Raises:
        SnapshotError: If a section, entry, or field has the wrong type.
    """
    if not isinstance(data, dict):
        raise SnapshotError("Snapshot must be a mapping")
    for pid, entry in _section(data, "products").items():
        _str_list(entry.get("compatible"), f"{pid}.compatible")
        _str_list(entry.get("versions"), f"{pid}.versions")
    for vid, entry in _section(data, "versions").items():
        owner = entry.get("product")
        if owner is not None and not isinstance(owner, str):
            raise SnapshotError(f"{vid}.product must be a string")
        _str_list(entry.get("supports"), f"{vid}.supports")
        _str_list(entry.get("dependencies"), f"{vid}.dependencies")


def _check_references(
    products: dict[str, Product], versions: dict[str, Version]
) -> None:
    for pid, product in products.items():
        for vid in product.versions:
            version = versions.get(vid)
            if version is None:
                raise SnapshotError(f"Product {pid!r} lists unknown version {vid!r}")
            if version.product != pid:
                raise SnapshotError(
                    f"Product {pid!r} lists version {vid!r}, which belongs to "
                    f"{version.product!r}"
                )
    for vid, version in versions.items():
        for dep in version.dependencies:
            if dep not in products:
                raise SnapshotError(
                    f"Version {vid!r} depends on unknown product {dep!r}"
                )


def _from_dict(cls: type, data: dict[str, Any]) -> Any:
    """Build a store from a snapshot dict.

    Missing list fields default to empty. The loaded store is not
    re-derived; run the consistency oracle to audit it.

    Raises:
        SnapshotError: If the dict does not match the snapshot schema or
            holds a reference to a product or version it does not define.
    """
    _check_document(data)

    products: dict[str, Product] = {}
    for pid, entry in _section(data, "products").items():
        products[str(pid)] = Product(
            product_id=str(pid),
            compatible=set(_str_list(entry.get("compatible"), f"{pid}.compatible")),
            versions=_str_list(entry.get("versions"), f"{pid}.versions"),
        )

    versions: dict[str, Version] = {}
    for vid, entry in _section(data, "versions").items():
        owner = entry.get("product")
        if owner not in products:
            raise SnapshotError(
                f"Version {vid!r} references unknown product {owner!r}"
            )
        versions[str(vid)] = Version(
            version_id=str(vid),
            product=owner,
            supports=set(_str_list(entry.get("supports"), f"{vid}.supports")),
            dependencies=_str_list(entry.get("dependencies"), f"{vid}.dependencies"),
        )

    _check_references(products, versions)

    store = cls()
    store._restore(products, versions)
    return store


def _from_json(cls: type, json_str: str) -> Any:
    """Deserialize a store from a JSON string.

    Raises:
        SnapshotError: If the string is not valid JSON or not a snapshot.
    """
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as exc:
        raise SnapshotError(f"Invalid snapshot JSON: {exc}") from exc
    return cls.from_dict(data)


def _read(cls: type, path: Path) -> Any:
    """Read a store snapshot from a JSON or YAML file.

    Raises:
        SnapshotError: If the file cannot be read or decoded.
    """
    return cls.from_dict(read_snapshot_file(path))


def load_snapshot_text(raw: str, yaml_format: bool = False) -> dict[str, Any]:
    """Parse snapshot text into a dict without building a store.

    Used for "expected state" documents, which are compared rather than
    loaded, so only their shape is checked.

    Raises:
        SnapshotError: If the text cannot be decoded or is not shaped like a
            snapshot.
    """
    try:
        data = yaml.safe_load(raw) if yaml_format else json.loads(raw)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise SnapshotError(f"Invalid snapshot document: {exc}") from exc
    _check_document(data)
    return data


def read_snapshot_file(path: Path) -> dict[str, Any]:
    """Read a snapshot document (JSON or YAML) as a plain dict."""
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SnapshotError(f"Cannot read snapshot {path}: {exc}") from exc
    return load_snapshot_text(raw, yaml_format=path.suffix.lower() in _YAML_SUFFIXES)


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------


def normalize_snapshot(data: dict[str, Any]) -> dict[str, Any]:
    """Normalize a snapshot dict for comparison.

    Spec sets (``compatible``, ``supports``) become frozensets, ordered
    lists (``versions``, ``dependencies``) become tuples. Missing sections
    and fields are treated as empty.

    Raises:
        SnapshotError: If the dict is not shaped like a snapshot.
    """
    _check_document(data)
    products = {
        str(pid): {
            "compatible": frozenset(entry.get("compatible") or ()),
            "versions": tuple(entry.get("versions") or ()),
        }
        for pid, entry in _section(data, "products").items()
    }
    versions = {
        str(vid): {
            "product": entry.get("product"),
            "supports": frozenset(entry.get("supports") or ()),
            "dependencies": tuple(entry.get("dependencies") or ()),
        }
        for vid, entry in _section(data, "versions").items()
    }
    return {"products": products, "versions": versions}
