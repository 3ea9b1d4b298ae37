"""Reference-capable schema tree.

This is the input model of the dereferencer. Every variant carries a
``CoreContext``; composite variants keep their discriminator and their
required flag there as well. ``ReferenceSchema`` is the only variant that
stands in for content stored elsewhere.
"""

from __future__ import annotations

from typing import Any, ClassVar, Union

from pydantic import BaseModel, ConfigDict, Field

from schema_dereferencer.core.constants import COMPONENTS_SCHEMAS_PREFIX
from schema_dereferencer.schema.contexts import (
    CoreContext,
    Discriminator,
    ExternalDocumentation,
    IntegerContext,
    NumericContext,
    StringContext,
)


class JSONSchema(BaseModel):
    """Base class of every schema node that may contain references."""

    model_config = ConfigDict(frozen=True)

    kind: ClassVar[str] = "schema"

    core: CoreContext = Field(default_factory=CoreContext)

    @property
    def format_string(self) -> str | None:
        return self.core.format

    @property
    def required(self) -> bool:
        return self.core.required

    @property
    def nullable(self) -> bool:
        return self.core.nullable

    @property
    def title(self) -> str | None:
        return self.core.title

    @property
    def description(self) -> str | None:
        return self.core.description

    @property
    def discriminator(self) -> Discriminator | None:
        return self.core.discriminator

    @property
    def external_docs(self) -> ExternalDocumentation | None:
        return self.core.external_docs

    @property
    def allowed_values(self) -> list[Any] | None:
        return self.core.allowed_values

    @property
    def example(self) -> Any:
        return self.core.example

    @property
    def read_only(self) -> bool:
        return self.core.read_only

    @property
    def write_only(self) -> bool:
        return self.core.write_only

    @property
    def deprecated(self) -> bool:
        return self.core.deprecated

    @property
    def object_context(self) -> ObjectContext | None:
        return None

    @property
    def array_context(self) -> ArrayContext | None:
        return None

    def with_required(self, required: bool) -> JSONSchema:
        """Return a copy of this schema with the given required flag."""
        return self.model_copy(update={"core": self.core.with_required(required)})


class SchemaReference(BaseModel):
    """A JSON reference string such as ``#/components/schemas/Pet``."""

    model_config = ConfigDict(frozen=True)

    target: str = Field(..., min_length=1)

    @classmethod
    def component(cls, name: str) -> SchemaReference:
        """Build a reference to a schema of the local components registry."""
        return cls(target=f"{COMPONENTS_SCHEMAS_PREFIX}{name}")

    @property
    def component_name(self) -> str | None:
        """Name of the referenced component, or None when the target is elsewhere."""
        if not self.target.startswith(COMPONENTS_SCHEMAS_PREFIX):
            return None
        name = self.target[len(COMPONENTS_SCHEMAS_PREFIX) :]
        if not name or "/" in name:
            return None
        return name.replace("~1", "/").replace("~0", "~")

    def __str__(self) -> str:
        return self.target


class BooleanAdditionalProperties(BaseModel):
    """``additionalProperties: true`` or ``additionalProperties: false``."""

    model_config = ConfigDict(frozen=True)

    allowed: bool


class SchemaAdditionalProperties(BaseModel):
    """``additionalProperties`` given as a schema."""

    model_config = ConfigDict(frozen=True)

    value: JSONSchema


AdditionalProperties = Union[BooleanAdditionalProperties, SchemaAdditionalProperties]


class ObjectContext(BaseModel):
    """Constraints that only apply to ``object`` schemas.

    Required property names are not stored here; a property is required when
    its own schema is marked required.
    """

    model_config = ConfigDict(frozen=True)

    properties: dict[str, JSONSchema] = Field(default_factory=dict)
    additional_properties: AdditionalProperties | None = None
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

        Never lower than the number of required properties, even when a
        smaller minimum was stated explicitly.
        """
        return max(self.explicit_min_properties or 0, len(self.required_properties))


class ArrayContext(BaseModel):
    """Constraints that only apply to ``array`` schemas."""

    model_config = ConfigDict(frozen=True)

    items: JSONSchema | None = None
    max_items: int | None = None
    explicit_min_items: int | None = None
    explicit_unique_items: bool | None = None

    @property
    def min_items(self) -> int:
        return self.explicit_min_items or 0

    @property
    def unique_items(self) -> bool:
        return bool(self.explicit_unique_items)


class BooleanSchema(JSONSchema):
    kind: ClassVar[str] = "boolean"


class ObjectSchema(JSONSchema):
    kind: ClassVar[str] = "object"

    context: ObjectContext = Field(default_factory=ObjectContext)

    @property
    def object_context(self) -> ObjectContext:
        return self.context


class ArraySchema(JSONSchema):
    kind: ClassVar[str] = "array"

    context: ArrayContext = Field(default_factory=ArrayContext)

    @property
    def array_context(self) -> ArrayContext:
        return self.context


class NumberSchema(JSONSchema):
    kind: ClassVar[str] = "number"

    context: NumericContext = Field(default_factory=NumericContext)


class IntegerSchema(JSONSchema):
    kind: ClassVar[str] = "integer"

    context: IntegerContext = Field(default_factory=IntegerContext)


class StringSchema(JSONSchema):
    kind: ClassVar[str] = "string"

    context: StringContext = Field(default_factory=StringContext)


class OneOfSchema(JSONSchema):
    kind: ClassVar[str] = "one_of"

    schemas: list[JSONSchema]


class AnyOfSchema(JSONSchema):
    kind: ClassVar[str] = "any_of"

    schemas: list[JSONSchema]


class AllOfSchema(JSONSchema):
    """Schemas whose fragments must all hold; resolved by combining them."""

    kind: ClassVar[str] = "all_of"

    schemas: list[JSONSchema]


class NotSchema(JSONSchema):
    kind: ClassVar[str] = "not"

    negated: JSONSchema


class ReferenceSchema(JSONSchema):
    """Stands in for the schema found at ``reference``.

    Only ``core.required`` is meaningful here; it records whether the
    position holding the reference is required.
    """

    kind: ClassVar[str] = "reference"

    reference: SchemaReference

    @classmethod
    def component(cls, name: str, required: bool = True) -> ReferenceSchema:
        return cls(
            reference=SchemaReference.component(name),
            core=CoreContext(required=required),
        )


class FragmentSchema(JSONSchema):
    """A schema without a ``type``, i.e. no constraint on the kind of value."""

    kind: ClassVar[str] = "fragment"


for _model in (
    SchemaAdditionalProperties,
    ObjectContext,
    ArrayContext,
    ObjectSchema,
    ArraySchema,
    OneOfSchema,
    AnyOfSchema,
    AllOfSchema,
    NotSchema,
):
    _model.model_rebuild()
