"""
OpenAPI Schema Dereferencer

A Python package for turning OpenAPI schemas into reference-free schemas by
resolving component references and combining allOf fragments.
"""

from schema_dereferencer.resolution.fragment_combiner import FragmentCombiner
from schema_dereferencer.resolution.resolver import (
    SchemaResolver,
    dereference,
    dereference_local,
)
from schema_dereferencer.schema.components import ComponentsRegistry
from schema_dereferencer.schema.dereferenced import DereferencedJSONSchema
from schema_dereferencer.schema.json_schema import JSONSchema

__all__ = [
    "ComponentsRegistry",
    "DereferencedJSONSchema",
    "FragmentCombiner",
    "JSONSchema",
    "SchemaResolver",
    "dereference",
    "dereference_local",
]
