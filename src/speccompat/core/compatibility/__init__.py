"""Compatibility derivation, propagation, and admission.

Submodules:
    engine       -- derive_compatibility, allowed_specs
    propagation  -- commit_compatibility (worklist cascade), affected_products
    admission    -- put_version, create_product, Admission
    consistency  -- check_consistency, assert_consistent, ConsistencyReport

All public names are re-exported here so that imports of the form
``from speccompat.core.compatibility import put_version`` work.
"""

from speccompat.core.compatibility.engine import (
    allowed_specs,
    derive_compatibility,
)
from speccompat.core.compatibility.propagation import (
    affected_products,
    commit_compatibility,
)
from speccompat.core.compatibility.admission import (
    Admission,
    create_product,
    put_version,
)
from speccompat.core.compatibility.consistency import (
    ConsistencyReport,
    assert_consistent,
    check_consistency,
    snapshots_equal,
)

__all__ = [
    "Admission",
    "ConsistencyReport",
    "affected_products",
    "allowed_specs",
    "assert_consistent",
    "check_consistency",
    "commit_compatibility",
    "create_product",
    "derive_compatibility",
    "put_version",
    "snapshots_equal",
]
