"""Schema dereferencing components."""

from schema_dereferencer.resolution.fragment_combiner import FragmentCombiner
from schema_dereferencer.resolution.resolver import (
    SchemaResolver,
    dereference,
    dereference_local,
)

__all__ = ["FragmentCombiner", "SchemaResolver", "dereference", "dereference_local"]
