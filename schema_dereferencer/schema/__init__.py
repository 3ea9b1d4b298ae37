"""Schema trees: reference-capable input, dereferenced output, and their codec."""

from schema_dereferencer.schema.components import ComponentsRegistry
from schema_dereferencer.schema.contexts import (
    CoreContext,
    Discriminator,
    ExternalDocumentation,
    IntegerContext,
    NumericContext,
    StringContext,
)
from schema_dereferencer.schema.dereferenced import (
    FORWARDED_METADATA,
    DereferencedAnyOfSchema,
    DereferencedArrayContext,
    DereferencedArraySchema,
    DereferencedBooleanSchema,
    DereferencedFragmentSchema,
    DereferencedIntegerSchema,
    DereferencedJSONSchema,
    DereferencedNotSchema,
    DereferencedNumberSchema,
    DereferencedObjectContext,
    DereferencedObjectSchema,
    DereferencedOneOfSchema,
    DereferencedSchemaAdditionalProperties,
    DereferencedStringSchema,
)
from schema_dereferencer.schema.json_schema import (
    AllOfSchema,
    AnyOfSchema,
    ArrayContext,
    ArraySchema,
    BooleanAdditionalProperties,
    BooleanSchema,
    FragmentSchema,
    IntegerSchema,
    JSONSchema,
    NotSchema,
    NumberSchema,
    ObjectContext,
    ObjectSchema,
    OneOfSchema,
    ReferenceSchema,
    SchemaAdditionalProperties,
    SchemaReference,
    StringSchema,
)

__all__ = [
    "ComponentsRegistry",
    "CoreContext",
    "Discriminator",
    "ExternalDocumentation",
    "IntegerContext",
    "NumericContext",
    "StringContext",
    "FORWARDED_METADATA",
    "DereferencedAnyOfSchema",
    "DereferencedArrayContext",
    "DereferencedArraySchema",
    "DereferencedBooleanSchema",
    "DereferencedFragmentSchema",
    "DereferencedIntegerSchema",
    "DereferencedJSONSchema",
    "DereferencedNotSchema",
    "DereferencedNumberSchema",
    "DereferencedObjectContext",
    "DereferencedObjectSchema",
    "DereferencedOneOfSchema",
    "DereferencedSchemaAdditionalProperties",
    "DereferencedStringSchema",
    "AllOfSchema",
    "AnyOfSchema",
    "ArrayContext",
    "ArraySchema",
    "BooleanAdditionalProperties",
    "BooleanSchema",
    "FragmentSchema",
    "IntegerSchema",
    "JSONSchema",
    "NotSchema",
    "NumberSchema",
    "ObjectContext",
    "ObjectSchema",
    "OneOfSchema",
    "ReferenceSchema",
    "SchemaAdditionalProperties",
    "SchemaReference",
    "StringSchema",
]
