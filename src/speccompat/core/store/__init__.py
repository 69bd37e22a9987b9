"""Product/Version store.

The package is split into focused submodules:

- ``models``: Data classes (``Product``, ``Version``).
- ``store``: The ``CompatibilityStore`` class with record management and
  identifier generation.
- ``snapshot``: Serialization (``to_dict``, ``to_json``, ``write``),
  deserialization (``from_dict``, ``from_json``, ``read``), and snapshot
  normalization for comparisons.

All public names are re-exported here so that imports like
``from speccompat.core.store import CompatibilityStore`` work.
"""

from speccompat.core.store.models import Product, Version
from speccompat.core.store.store import (
    PRODUCT_ID_PREFIX,
    VERSION_ID_PREFIX,
    CompatibilityStore,
)

# Attach snapshot operations to CompatibilityStore as methods/classmethods
from speccompat.core.store import snapshot as _snapshot
from speccompat.core.store.snapshot import (
    normalize_snapshot,
    read_snapshot_file,
)

CompatibilityStore.to_dict = _snapshot._to_dict
CompatibilityStore.to_json = _snapshot._to_json
CompatibilityStore.write = _snapshot._write
CompatibilityStore.from_dict = classmethod(_snapshot._from_dict)
CompatibilityStore.from_json = classmethod(_snapshot._from_json)
CompatibilityStore.read = classmethod(_snapshot._read)

__all__ = [
    "CompatibilityStore",
    "Product",
    "Version",
    "PRODUCT_ID_PREFIX",
    "VERSION_ID_PREFIX",
    "normalize_snapshot",
    "read_snapshot_file",
]
