"""Conversion between OpenAPI 3.0 schema objects (parsed JSON) and schema trees."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from pydantic import ValidationError

from schema_dereferencer.core.constants import (
    ALL_OF_FIELD,
    ANY_OF_FIELD,
    ARRAY_TYPE,
    BOOLEAN_TYPE,
    INTEGER_TYPE,
    NOT_FIELD,
    NUMBER_TYPE,
    OBJECT_TYPE,
    ONE_OF_FIELD,
    REF_FIELD,
    STRING_TYPE,
)
from schema_dereferencer.core.exceptions import SchemaDecodingError
from schema_dereferencer.core.schemas import ComponentSpec
from schema_dereferencer.schema.components import ComponentsRegistry
from schema_dereferencer.schema.contexts import (
    CoreContext,
    Discriminator,
    ExternalDocumentation,
    IntegerContext,
    NumericContext,
    StringContext,
)
from schema_dereferencer.schema.dereferenced import DereferencedJSONSchema
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

_MISSING = object()


def decode_schema(
    data: Any, required: bool = True, path: Sequence[str] = ()
) -> JSONSchema:
    """Decode an OpenAPI schema object into a schema tree.

    Args:
        data: Parsed JSON value of the schema object
        required: Whether the position holding this schema is required
        path: Location of the schema object inside its document

    Returns:
        The decoded schema

    Raises:
        SchemaDecodingError: If the value is not a valid schema object
    """
    path = list(path)
    if not isinstance(data, dict):
        raise SchemaDecodingError("schema must be a JSON object", path)

    if REF_FIELD in data:
        target = _field(data, REF_FIELD, str, path)
        if not target:
            raise SchemaDecodingError(f"'{REF_FIELD}' must not be empty", path)
        return ReferenceSchema(
            reference=SchemaReference(target=target),
            core=CoreContext(required=required),
        )

    if ALL_OF_FIELD in data:
        return _decode_all_of(data, required, path)

    core = _decode_core(data, required, path)

    if ONE_OF_FIELD in data:
        return OneOfSchema(core=core, schemas=_decode_members(data, ONE_OF_FIELD, path))
    if ANY_OF_FIELD in data:
        return AnyOfSchema(core=core, schemas=_decode_members(data, ANY_OF_FIELD, path))
    if NOT_FIELD in data:
        return NotSchema(
            core=core, negated=decode_schema(data[NOT_FIELD], path=[*path, NOT_FIELD])
        )

    schema_type = data.get("type", _MISSING)
    if schema_type is _MISSING:
        schema_type = _infer_type(data, path)

    if schema_type == BOOLEAN_TYPE:
        return BooleanSchema(core=core)
    if schema_type == OBJECT_TYPE:
        return ObjectSchema(core=core, context=_decode_object_context(data, path))
    if schema_type == ARRAY_TYPE:
        return ArraySchema(core=core, context=_decode_array_context(data, path))
    if schema_type == NUMBER_TYPE:
        return NumberSchema(core=core, context=_decode_numeric_context(data, path))
    if schema_type == INTEGER_TYPE:
        return IntegerSchema(core=core, context=_decode_integer_context(data, path))
    if schema_type == STRING_TYPE:
        return StringSchema(core=core, context=_decode_string_context(data, path))
    if schema_type is None:
        return FragmentSchema(core=core)

    raise SchemaDecodingError(f"unsupported schema type {schema_type!r}", path)


def decode_components(document: dict[str, Any]) -> ComponentsRegistry:
    """Decode ``components.schemas`` of an OpenAPI document into a registry.

    Raises:
        SchemaDecodingError: If a component name or schema is invalid
    """
    components = document.get("components", {})
    if not isinstance(components, dict):
        raise SchemaDecodingError("'components' must be a JSON object", ["components"])
    schemas = components.get("schemas", {})
    if not isinstance(schemas, dict):
        raise SchemaDecodingError(
            "'schemas' must be a JSON object", ["components", "schemas"]
        )

    decoded: dict[str, JSONSchema] = {}
    for name, value in schemas.items():
        path = ["components", "schemas", str(name)]
        try:
            spec = ComponentSpec(name=name)
        except ValidationError as e:
            raise SchemaDecodingError(f"invalid component name: {e}", path) from e
        decoded[spec.name] = decode_schema(value, path=path)

    return ComponentsRegistry(schemas=decoded)


def encode_schema(schema: JSONSchema) -> dict[str, Any]:
    """Encode a schema tree as an OpenAPI schema object.

    The required flag of the schema itself is not encoded; objects encode the
    required flags of their properties as a ``required`` list.
    """
    if isinstance(schema, ReferenceSchema):
        return {REF_FIELD: schema.reference.target}

    result: dict[str, Any] = {}
    if isinstance(schema, ObjectSchema):
        result["type"] = OBJECT_TYPE
    elif isinstance(schema, ArraySchema):
        result["type"] = ARRAY_TYPE
    elif isinstance(schema, BooleanSchema):
        result["type"] = BOOLEAN_TYPE
    elif isinstance(schema, NumberSchema):
        result["type"] = NUMBER_TYPE
    elif isinstance(schema, IntegerSchema):
        result["type"] = INTEGER_TYPE
    elif isinstance(schema, StringSchema):
        result["type"] = STRING_TYPE

    result.update(_encode_core(schema.core))

    if isinstance(schema, ObjectSchema):
        result.update(_encode_object_context(schema.context))
    elif isinstance(schema, ArraySchema):
        result.update(_encode_array_context(schema.context))
    elif isinstance(schema, (NumberSchema, IntegerSchema)):
        result.update(_encode_numeric_context(schema.context))
    elif isinstance(schema, StringSchema):
        result.update(_encode_string_context(schema.context))
    elif isinstance(schema, AllOfSchema):
        result[ALL_OF_FIELD] = [encode_schema(s) for s in schema.schemas]
    elif isinstance(schema, OneOfSchema):
        result[ONE_OF_FIELD] = [encode_schema(s) for s in schema.schemas]
    elif isinstance(schema, AnyOfSchema):
        result[ANY_OF_FIELD] = [encode_schema(s) for s in schema.schemas]
    elif isinstance(schema, NotSchema):
        result[NOT_FIELD] = encode_schema(schema.negated)

    return result


def encode_dereferenced(schema: DereferencedJSONSchema) -> dict[str, Any]:
    """Encode a dereferenced schema through its reference-capable projection."""
    return encode_schema(schema.project_to_schema())


def _field(
    data: dict[str, Any],
    key: str,
    expected: type | tuple[type, ...],
    path: list[str],
    default: Any = None,
) -> Any:
    """Read an optional field, checking its JSON type."""
    if key not in data or data[key] is None:
        return default
    value = data[key]
    # JSON booleans are not numbers
    if isinstance(value, bool) and bool not in _as_tuple(expected):
        raise SchemaDecodingError(f"'{key}' has an invalid type", [*path, key])
    if not isinstance(value, expected):
        raise SchemaDecodingError(f"'{key}' has an invalid type", [*path, key])
    return value


def _as_tuple(expected: type | tuple[type, ...]) -> tuple[type, ...]:
    return expected if isinstance(expected, tuple) else (expected,)


def _integer_field(data: dict[str, Any], key: str, path: list[str]) -> int | None:
    value = _field(data, key, (int, float), path)
    if value is None:
        return None
    if isinstance(value, float):
        if not value.is_integer():
            raise SchemaDecodingError(f"'{key}' must be an integer", [*path, key])
        return int(value)
    return value


_TYPE_KEYWORDS: dict[str, tuple[str, ...]] = {
    OBJECT_TYPE: (
        "properties",
        "additionalProperties",
        "required",
        "minProperties",
        "maxProperties",
    ),
    ARRAY_TYPE: ("items", "minItems", "maxItems", "uniqueItems"),
    STRING_TYPE: ("minLength", "maxLength", "pattern"),
}

# Shared by number and integer, so they cannot decide the type.
_NUMERIC_KEYWORDS = (
    "minimum",
    "maximum",
    "exclusiveMinimum",
    "exclusiveMaximum",
    "multipleOf",
)


def _infer_type(data: dict[str, Any], path: list[str]) -> str | None:
    """Infer the type of a schema without ``type`` from its keywords.

    Returns None when only type independent keywords are present. Numeric
    keywords, or keywords of several types, raise SchemaDecodingError.
    """
    numeric = [keyword for keyword in _NUMERIC_KEYWORDS if keyword in data]
    if numeric:
        raise SchemaDecodingError(
            f"'{numeric[0]}' needs an explicit 'type' of number or integer", path
        )
    candidates = [
        schema_type
        for schema_type, keywords in _TYPE_KEYWORDS.items()
        if any(keyword in data for keyword in keywords)
    ]
    if len(candidates) > 1:
        raise SchemaDecodingError(
            f"keywords of types {', '.join(candidates)} without 'type'", path
        )
    return candidates[0] if candidates else None


def _decode_core(data: dict[str, Any], required: bool, path: list[str]) -> CoreContext:
    discriminator = None
    raw_discriminator = _field(data, "discriminator", dict, path)
    if raw_discriminator is not None:
        discriminator_path = [*path, "discriminator"]
        property_name = _field(raw_discriminator, "propertyName", str, discriminator_path)
        if not property_name:
            raise SchemaDecodingError("'propertyName' is required", discriminator_path)
        discriminator = Discriminator(
            property_name=property_name,
            mapping=_field(raw_discriminator, "mapping", dict, discriminator_path),
        )

    external_docs = None
    raw_docs = _field(data, "externalDocs", dict, path)
    if raw_docs is not None:
        docs_path = [*path, "externalDocs"]
        url = _field(raw_docs, "url", str, docs_path)
        if not url:
            raise SchemaDecodingError("'url' is required", docs_path)
        external_docs = ExternalDocumentation(
            url=url,
            description=_field(raw_docs, "description", str, docs_path),
        )

    return CoreContext(
        format=_field(data, "format", str, path),
        required=required,
        nullable=_field(data, "nullable", bool, path, default=False),
        title=_field(data, "title", str, path),
        description=_field(data, "description", str, path),
        default=data.get("default"),
        example=data.get("example"),
        discriminator=discriminator,
        external_docs=external_docs,
        allowed_values=_field(data, "enum", list, path),
        read_only=_field(data, "readOnly", bool, path, default=False),
        write_only=_field(data, "writeOnly", bool, path, default=False),
        deprecated=_field(data, "deprecated", bool, path, default=False),
    )


def _decode_members(data: dict[str, Any], key: str, path: list[str]) -> list[JSONSchema]:
    members = _field(data, key, list, path)
    if not members:
        raise SchemaDecodingError(f"'{key}' must be a non-empty array", [*path, key])
    return [
        decode_schema(member, path=[*path, key, str(index)])
        for index, member in enumerate(members)
    ]


def _decode_all_of(data: dict[str, Any], required: bool, path: list[str]) -> AllOfSchema:
    fragments = _decode_members(data, ALL_OF_FIELD, path)

    # Keywords next to allOf constrain the value too; they become the last
    # fragment so that their metadata takes precedence.
    siblings = {
        key: value
        for key, value in data.items()
        if key not in (ALL_OF_FIELD, "discriminator")
    }
    if siblings:
        fragments.append(decode_schema(siblings, path=path))

    discriminator_core = _decode_core(
        {"discriminator": data["discriminator"]} if "discriminator" in data else {},
        required,
        path,
    )
    return AllOfSchema(core=discriminator_core, schemas=fragments)


def _decode_object_context(data: dict[str, Any], path: list[str]) -> ObjectContext:
    raw_properties = _field(data, "properties", dict, path, default={})
    required_names = _field(data, "required", list, path, default=[])
    if not all(isinstance(name, str) for name in required_names):
        raise SchemaDecodingError("'required' must list property names", [*path, "required"])

    properties: dict[str, JSONSchema] = {}
    for name, value in raw_properties.items():
        properties[name] = decode_schema(
            value,
            required=name in required_names,
            path=[*path, "properties", name],
        )
    # Required names without a property definition only demand presence.
    for name in required_names:
        if name not in properties:
            properties[name] = FragmentSchema(core=CoreContext(required=True))

    additional_properties: BooleanAdditionalProperties | SchemaAdditionalProperties | None
    raw_additional = data.get("additionalProperties")
    if raw_additional is None:
        additional_properties = None
    elif isinstance(raw_additional, bool):
        additional_properties = BooleanAdditionalProperties(allowed=raw_additional)
    else:
        additional_properties = SchemaAdditionalProperties(
            value=decode_schema(raw_additional, path=[*path, "additionalProperties"])
        )

    return ObjectContext(
        properties=properties,
        additional_properties=additional_properties,
        max_properties=_integer_field(data, "maxProperties", path),
        explicit_min_properties=_integer_field(data, "minProperties", path),
    )


def _decode_array_context(data: dict[str, Any], path: list[str]) -> ArrayContext:
    raw_items = data.get("items")
    return ArrayContext(
        items=decode_schema(raw_items, path=[*path, "items"])
        if raw_items is not None
        else None,
        max_items=_integer_field(data, "maxItems", path),
        explicit_min_items=_integer_field(data, "minItems", path),
        explicit_unique_items=_field(data, "uniqueItems", bool, path),
    )


def _decode_numeric_context(data: dict[str, Any], path: list[str]) -> NumericContext:
    return NumericContext(
        multiple_of=_field(data, "multipleOf", (int, float), path),
        maximum=_field(data, "maximum", (int, float), path),
        exclusive_maximum=_field(data, "exclusiveMaximum", bool, path, default=False),
        minimum=_field(data, "minimum", (int, float), path),
        exclusive_minimum=_field(data, "exclusiveMinimum", bool, path, default=False),
    )


def _decode_integer_context(data: dict[str, Any], path: list[str]) -> IntegerContext:
    return IntegerContext(
        multiple_of=_integer_field(data, "multipleOf", path),
        maximum=_integer_field(data, "maximum", path),
        exclusive_maximum=_field(data, "exclusiveMaximum", bool, path, default=False),
        minimum=_integer_field(data, "minimum", path),
        exclusive_minimum=_field(data, "exclusiveMinimum", bool, path, default=False),
    )


def _decode_string_context(data: dict[str, Any], path: list[str]) -> StringContext:
    return StringContext(
        max_length=_integer_field(data, "maxLength", path),
        explicit_min_length=_integer_field(data, "minLength", path),
        pattern=_field(data, "pattern", str, path),
    )


def _encode_core(core: CoreContext) -> dict[str, Any]:
    result: dict[str, Any] = {}
    if core.format is not None:
        result["format"] = core.format
    if core.title is not None:
        result["title"] = core.title
    if core.description is not None:
        result["description"] = core.description
    if core.nullable:
        result["nullable"] = True
    if core.default is not None:
        result["default"] = core.default
    if core.example is not None:
        result["example"] = core.example
    if core.allowed_values is not None:
        result["enum"] = list(core.allowed_values)
    if core.discriminator is not None:
        discriminator: dict[str, Any] = {
            "propertyName": core.discriminator.property_name
        }
        if core.discriminator.mapping is not None:
            discriminator["mapping"] = dict(core.discriminator.mapping)
        result["discriminator"] = discriminator
    if core.external_docs is not None:
        docs = {"url": core.external_docs.url}
        if core.external_docs.description is not None:
            docs["description"] = core.external_docs.description
        result["externalDocs"] = docs
    if core.read_only:
        result["readOnly"] = True
    if core.write_only:
        result["writeOnly"] = True
    if core.deprecated:
        result["deprecated"] = True
    return result


def _encode_object_context(context: ObjectContext) -> dict[str, Any]:
    result: dict[str, Any] = {}
    if context.properties:
        result["properties"] = {
            name: encode_schema(schema) for name, schema in context.properties.items()
        }
    if context.required_properties:
        result["required"] = context.required_properties
    if isinstance(context.additional_properties, BooleanAdditionalProperties):
        result["additionalProperties"] = context.additional_properties.allowed
    elif isinstance(context.additional_properties, SchemaAdditionalProperties):
        result["additionalProperties"] = encode_schema(
            context.additional_properties.value
        )
    if context.max_properties is not None:
        result["maxProperties"] = context.max_properties
    if context.explicit_min_properties is not None:
        result["minProperties"] = context.explicit_min_properties
    return result


def _encode_array_context(context: ArrayContext) -> dict[str, Any]:
    result: dict[str, Any] = {}
    if context.items is not None:
        result["items"] = encode_schema(context.items)
    if context.max_items is not None:
        result["maxItems"] = context.max_items
    if context.explicit_min_items is not None:
        result["minItems"] = context.explicit_min_items
    if context.explicit_unique_items is not None:
        result["uniqueItems"] = context.explicit_unique_items
    return result


def _encode_numeric_context(context: NumericContext | IntegerContext) -> dict[str, Any]:
    result: dict[str, Any] = {}
    if context.multiple_of is not None:
        result["multipleOf"] = context.multiple_of
    if context.maximum is not None:
        result["maximum"] = context.maximum
        if context.exclusive_maximum:
            result["exclusiveMaximum"] = True
    if context.minimum is not None:
        result["minimum"] = context.minimum
        if context.exclusive_minimum:
            result["exclusiveMinimum"] = True
    return result


def _encode_string_context(context: StringContext) -> dict[str, Any]:
    result: dict[str, Any] = {}
    if context.max_length is not None:
        result["maxLength"] = context.max_length
    if context.explicit_min_length is not None:
        result["minLength"] = context.explicit_min_length
    if context.pattern is not None:
        result["pattern"] = context.pattern
    return result
