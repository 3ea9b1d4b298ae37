"""Dereferenced schema tree.

Mirrors ``schema_dereferencer.schema.json_schema`` without the reference
variant, so no node of a dereferenced tree can stand in for content stored
elsewhere. Instances are produced by the resolver and can always be projected
back to the reference-capable form with ``project_to_schema()``. The reverse is
not true.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Any, ClassVar, Union

from pydantic import BaseModel, ConfigDict, Field

from schema_dereferencer.schema.contexts import (
    CoreContext,
    Discriminator,
    ExternalDocumentation,
    IntegerContext,
    NumericContext,
    StringContext,
)
from schema_dereferencer.schema.json_schema import (
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
    SchemaAdditionalProperties,
    StringSchema,
)

# Metadata read through the projection; every dereferenced variant exposes these.
FORWARDED_METADATA: tuple[str, ...] = (
    "format_string",
    "required",
    "nullable",
    "title",
    "description",
    "discriminator",
    "external_docs",
    "allowed_values",
    "example",
    "read_only",
    "write_only",
    "deprecated",
)


class DereferencedJSONSchema(BaseModel):
    """Base class of every schema node that is guaranteed to be reference free.

    Abstract: only the variants below can be instantiated.
    """

    model_config = ConfigDict(frozen=True)

    kind: ClassVar[str] = "schema"

    core: CoreContext = Field(default_factory=CoreContext)

    @abstractmethod
    def project_to_schema(self) -> JSONSchema:
        """Get the reference-capable representation of this schema."""

    def with_discriminator(self, discriminator: Discriminator) -> DereferencedJSONSchema:
        """Return a copy of this schema with the given discriminator."""
        return self.model_copy(
            update={"core": self.core.with_discriminator(discriminator)}
        )

    def with_required(self, required: bool) -> DereferencedJSONSchema:
        """Return a copy of this schema with the given required flag."""
        return self.model_copy(update={"core": self.core.with_required(required)})

    @property
    def object_context(self) -> DereferencedObjectContext | None:
        return None

    @property
    def array_context(self) -> DereferencedArrayContext | None:
        return None

    # Metadata forwarding. Each accessor reads the projected schema so the
    # two representations cannot disagree.

    @property
    def format_string(self) -> str | None:
        return self.project_to_schema().format_string

    @property
    def required(self) -> bool:
        return self.project_to_schema().required

    @property
    def nullable(self) -> bool:
        return self.project_to_schema().nullable

    @property
    def title(self) -> str | None:
        return self.project_to_schema().title

    @property
    def description(self) -> str | None:
        return self.project_to_schema().description

    @property
    def discriminator(self) -> Discriminator | None:
        return self.project_to_schema().discriminator

    @property
    def external_docs(self) -> ExternalDocumentation | None:
        return self.project_to_schema().external_docs

    @property
    def allowed_values(self) -> list[Any] | None:
        return self.project_to_schema().allowed_values

    @property
    def example(self) -> Any:
        return self.project_to_schema().example

    @property
    def read_only(self) -> bool:
        return self.project_to_schema().read_only

    @property
    def write_only(self) -> bool:
        return self.project_to_schema().write_only

    @property
    def deprecated(self) -> bool:
        return self.project_to_schema().deprecated


class DereferencedSchemaAdditionalProperties(BaseModel):
    """``additionalProperties`` given as a dereferenced schema."""

    model_config = ConfigDict(frozen=True)

    value: DereferencedJSONSchema


DereferencedAdditionalProperties = Union[
    BooleanAdditionalProperties, DereferencedSchemaAdditionalProperties
]


class DereferencedObjectContext(BaseModel):
    """The object context of a dereferenced ``object`` schema."""

    model_config = ConfigDict(frozen=True)

    properties: dict[str, DereferencedJSONSchema] = Field(default_factory=dict)
    additional_properties: DereferencedAdditionalProperties | None = None
    max_properties: int | None = None
    explicit_min_properties: int | None = None

    @property
    def required_properties(self) -> list[str]:
        return [name for name, schema in self.properties.items() if schema.required]

    @property
    def optional_properties(self) -> list[str]:
        return [
            name for name, schema in self.properties.items() if not schema.required
        ]

    @property
    def min_properties(self) -> int:
        """The minimum number of properties.

        This can contradict an explicitly stated minimum when more properties
        are required than that minimum allows for.
        """
        return max(self.explicit_min_properties or 0, len(self.required_properties))

    def to_object_context(self) -> ObjectContext:
        additional_properties: (
            BooleanAdditionalProperties | SchemaAdditionalProperties | None
        )
        if isinstance(self.additional_properties, DereferencedSchemaAdditionalProperties):
            additional_properties = SchemaAdditionalProperties(
                value=self.additional_properties.value.project_to_schema()
            )
        else:
            additional_properties = self.additional_properties

        return ObjectContext(
            properties={
                name: schema.project_to_schema()
                for name, schema in self.properties.items()
            },
            additional_properties=additional_properties,
            max_properties=self.max_properties,
            explicit_min_properties=self.explicit_min_properties,
        )


class DereferencedArrayContext(BaseModel):
    """The array context of a dereferenced ``array`` schema."""

    model_config = ConfigDict(frozen=True)

    items: DereferencedJSONSchema | None = None
    max_items: int | None = None
    explicit_min_items: int | None = None
    explicit_unique_items: bool | None = None

    @property
    def min_items(self) -> int:
        """Minimum number of items, 0 when not stated."""
        return self.explicit_min_items or 0

    @property
    def unique_items(self) -> bool:
        """Whether items must be unique, False when not stated."""
        return bool(self.explicit_unique_items)

    def to_array_context(self) -> ArrayContext:
        return ArrayContext(
            items=self.items.project_to_schema() if self.items is not None else None,
            max_items=self.max_items,
            explicit_min_items=self.explicit_min_items,
            explicit_unique_items=self.explicit_unique_items,
        )


class DereferencedBooleanSchema(DereferencedJSONSchema):
    kind: ClassVar[str] = "boolean"

    def project_to_schema(self) -> JSONSchema:
        return BooleanSchema(core=self.core)


class DereferencedObjectSchema(DereferencedJSONSchema):
    kind: ClassVar[str] = "object"

    context: DereferencedObjectContext = Field(
        default_factory=DereferencedObjectContext
    )

    @property
    def object_context(self) -> DereferencedObjectContext:
        return self.context

    def project_to_schema(self) -> JSONSchema:
        return ObjectSchema(core=self.core, context=self.context.to_object_context())


class DereferencedArraySchema(DereferencedJSONSchema):
    kind: ClassVar[str] = "array"

    context: DereferencedArrayContext = Field(default_factory=DereferencedArrayContext)

    @property
    def array_context(self) -> DereferencedArrayContext:
        return self.context

    def project_to_schema(self) -> JSONSchema:
        return ArraySchema(core=self.core, context=self.context.to_array_context())


class DereferencedNumberSchema(DereferencedJSONSchema):
    kind: ClassVar[str] = "number"

    context: NumericContext = Field(default_factory=NumericContext)

    def project_to_schema(self) -> JSONSchema:
        return NumberSchema(core=self.core, context=self.context)


class DereferencedIntegerSchema(DereferencedJSONSchema):
    kind: ClassVar[str] = "integer"

    context: IntegerContext = Field(default_factory=IntegerContext)

    def project_to_schema(self) -> JSONSchema:
        return IntegerSchema(core=self.core, context=self.context)


class DereferencedStringSchema(DereferencedJSONSchema):
    kind: ClassVar[str] = "string"

    context: StringContext = Field(default_factory=StringContext)

    def project_to_schema(self) -> JSONSchema:
        return StringSchema(core=self.core, context=self.context)


class DereferencedOneOfSchema(DereferencedJSONSchema):
    kind: ClassVar[str] = "one_of"

    schemas: list[DereferencedJSONSchema]

    def project_to_schema(self) -> JSONSchema:
        return OneOfSchema(
            core=self.core, schemas=[s.project_to_schema() for s in self.schemas]
        )


class DereferencedAnyOfSchema(DereferencedJSONSchema):
    kind: ClassVar[str] = "any_of"

    schemas: list[DereferencedJSONSchema]

    def project_to_schema(self) -> JSONSchema:
        return AnyOfSchema(
            core=self.core, schemas=[s.project_to_schema() for s in self.schemas]
        )


class DereferencedNotSchema(DereferencedJSONSchema):
    kind: ClassVar[str] = "not"

    negated: DereferencedJSONSchema

    def project_to_schema(self) -> JSONSchema:
        return NotSchema(core=self.core, negated=self.negated.project_to_schema())

    def with_discriminator(self, discriminator: Discriminator) -> DereferencedJSONSchema:
        # A discriminator has no meaning on a negation.
        return self


class DereferencedFragmentSchema(DereferencedJSONSchema):
    """A dereferenced schema without a ``type``."""

    kind: ClassVar[str] = "fragment"

    def project_to_schema(self) -> JSONSchema:
        return FragmentSchema(core=self.core)


for _model in (
    DereferencedSchemaAdditionalProperties,
    DereferencedObjectContext,
    DereferencedArrayContext,
    DereferencedObjectSchema,
    DereferencedArraySchema,
    DereferencedOneOfSchema,
    DereferencedAnyOfSchema,
    DereferencedNotSchema,
):
    _model.model_rebuild()
