"""Tests for SchemaResolver and the module level dereference helpers."""

import pytest

from schema_dereferencer.core.exceptions import (
    CyclicReferenceError,
    FragmentCombinationError,
    MissingComponentError,
    UnresolvableRemoteReferenceError,
)
from schema_dereferencer.resolution.resolver import (
    SchemaResolver,
    dereference,
    dereference_local,
)
from schema_dereferencer.schema.codec import decode_components
from schema_dereferencer.schema.components import ComponentsRegistry
from schema_dereferencer.schema.contexts import (
    CoreContext,
    Discriminator,
    IntegerContext,
    NumericContext,
    StringContext,
)
from schema_dereferencer.schema.dereferenced import (
    DereferencedAnyOfSchema,
    DereferencedIntegerSchema,
    DereferencedNotSchema,
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


def reference_free_tree():
    return ObjectSchema(
        core=CoreContext(title="Order", description="An order"),
        context=ObjectContext(
            properties={
                "id": IntegerSchema(context=IntegerContext(minimum=1)),
                "paid": BooleanSchema(core=CoreContext(required=False)),
                "total": NumberSchema(context=NumericContext(minimum=0.0)),
                "lines": ArraySchema(
                    context=ArrayContext(
                        items=ObjectSchema(
                            context=ObjectContext(
                                properties={"sku": StringSchema()},
                                additional_properties=BooleanAdditionalProperties(
                                    allowed=False
                                ),
                            )
                        ),
                        explicit_min_items=1,
                    )
                ),
                "status": OneOfSchema(
                    core=CoreContext(
                        discriminator=Discriminator(property_name="kind")
                    ),
                    schemas=[StringSchema(), IntegerSchema()],
                ),
                "note": AnyOfSchema(schemas=[StringSchema(), FragmentSchema()]),
                "never": NotSchema(negated=StringSchema()),
            },
            additional_properties=SchemaAdditionalProperties(value=StringSchema()),
            max_properties=10,
        ),
    )


def test_detect_cyclic_reference():
    resolver = SchemaResolver(ComponentsRegistry.empty())
    resolver.resolution_stack = ["A", "B"]
    assert resolver.detect_cyclic_reference("A")
    assert not resolver.detect_cyclic_reference("C")


def test_reference_free_tree_projects_back_unchanged(simple_registry):
    tree = reference_free_tree()

    result = dereference(tree, simple_registry)

    assert result.project_to_schema() == tree
    assert dereference(tree, ComponentsRegistry.empty()) == result


def test_reference_chain_is_fully_resolved(simple_registry):
    result = dereference(ReferenceSchema.component("AliasOfAlias"), simple_registry)

    assert isinstance(result, DereferencedStringSchema)
    assert result.title == "Name"
    assert result.context.max_length == 32


def test_reference_resolves_like_substitution(simple_registry):
    via_reference = dereference(ReferenceSchema.component("Person"), simple_registry)
    substituted = dereference(simple_registry.lookup("Person"), simple_registry)

    assert via_reference == substituted
    assert isinstance(via_reference, DereferencedObjectSchema)
    assert isinstance(
        via_reference.context.properties["name"], DereferencedStringSchema
    )


def test_missing_component():
    schema = ObjectSchema(
        context=ObjectContext(properties={"foo": ReferenceSchema.component("Foo")})
    )

    with pytest.raises(MissingComponentError) as exc_info:
        dereference(schema, ComponentsRegistry.empty())

    assert exc_info.value.name == "Foo"
    assert exc_info.value.path == ["properties", "foo"]
    assert "/properties/foo" in str(exc_info.value)


def test_remote_reference_is_never_looked_up(mock_lookup):
    schema = ReferenceSchema(
        reference=SchemaReference(target="other.yaml#/components/schemas/Pet")
    )

    with pytest.raises(UnresolvableRemoteReferenceError) as exc_info:
        SchemaResolver(mock_lookup).dereference(schema)

    assert exc_info.value.target == "other.yaml#/components/schemas/Pet"
    mock_lookup.lookup.assert_not_called()


def test_reference_to_non_component_location_is_remote(mock_lookup):
    schema = ReferenceSchema(reference=SchemaReference(target="#/paths/~1pets"))

    with pytest.raises(UnresolvableRemoteReferenceError):
        SchemaResolver(mock_lookup).dereference(schema)
    mock_lookup.lookup.assert_not_called()


def test_self_reference_is_cyclic():
    registry = ComponentsRegistry(schemas={"A": ReferenceSchema.component("A")})

    with pytest.raises(CyclicReferenceError) as exc_info:
        dereference(ReferenceSchema.component("A"), registry)

    assert exc_info.value.reference_chain == ["A", "A"]


def test_recursive_property_is_cyclic():
    registry = ComponentsRegistry(
        schemas={
            "Node": ObjectSchema(
                context=ObjectContext(
                    properties={
                        "next": ReferenceSchema.component("Node", required=False)
                    }
                )
            )
        }
    )

    with pytest.raises(CyclicReferenceError) as exc_info:
        SchemaResolver(registry).dereference_component("Node")

    assert exc_info.value.reference_chain == ["Node", "Node"]


def test_transitive_cycle():
    registry = ComponentsRegistry(
        schemas={
            "A": ReferenceSchema.component("B"),
            "B": ArraySchema(context=ArrayContext(items=ReferenceSchema.component("A"))),
        }
    )

    with pytest.raises(CyclicReferenceError) as exc_info:
        SchemaResolver(registry).dereference_component("A")

    assert exc_info.value.reference_chain == ["A", "B", "A"]


def test_resolution_stack_is_empty_after_failure():
    registry = ComponentsRegistry(schemas={"A": ReferenceSchema.component("Missing")})
    resolver = SchemaResolver(registry)

    with pytest.raises(MissingComponentError):
        resolver.dereference_component("A")

    assert resolver.resolution_stack == []


def test_shared_component_is_not_a_cycle(simple_registry):
    schema = OneOfSchema(
        schemas=[ReferenceSchema.component("Name"), ReferenceSchema.component("Name")]
    )

    result = dereference(schema, simple_registry)

    assert result.schemas[0] == result.schemas[1]


def test_first_failing_property_is_reported():
    schema = ObjectSchema(
        context=ObjectContext(
            properties={
                "b": ReferenceSchema.component("Second"),
                "a": ReferenceSchema.component("First"),
            }
        )
    )

    with pytest.raises(MissingComponentError) as exc_info:
        dereference(schema, ComponentsRegistry.empty())

    # Declaration order, not alphabetical order
    assert exc_info.value.name == "Second"


def test_one_of_keeps_member_order_and_discriminator(simple_registry):
    discriminator = Discriminator(property_name="type")
    schema = OneOfSchema(
        core=CoreContext(discriminator=discriminator),
        schemas=[ReferenceSchema.component("Alias"), IntegerSchema()],
    )

    result = dereference(schema, simple_registry)

    assert isinstance(result, DereferencedOneOfSchema)
    assert result.discriminator == discriminator
    assert isinstance(result.schemas[0], DereferencedStringSchema)
    assert isinstance(result.schemas[1], DereferencedIntegerSchema)


def test_one_of_first_failing_member_aborts():
    schema = AnyOfSchema(
        schemas=[ReferenceSchema.component("One"), ReferenceSchema.component("Two")]
    )

    with pytest.raises(MissingComponentError) as exc_info:
        dereference(schema, ComponentsRegistry.empty())

    assert exc_info.value.name == "One"
    assert exc_info.value.path == ["anyOf", "0"]


def test_any_of_and_not_are_dereferenced(simple_registry):
    schema = AnyOfSchema(
        schemas=[NotSchema(negated=ReferenceSchema.component("Name")), BooleanSchema()]
    )

    result = dereference(schema, simple_registry)

    assert isinstance(result, DereferencedAnyOfSchema)
    assert isinstance(result.schemas[0], DereferencedNotSchema)
    assert isinstance(result.schemas[0].negated, DereferencedStringSchema)


def test_additional_properties_schema_is_dereferenced(simple_registry):
    schema = ObjectSchema(
        context=ObjectContext(
            additional_properties=SchemaAdditionalProperties(
                value=ReferenceSchema.component("Alias")
            )
        )
    )

    result = dereference(schema, simple_registry)

    additional = result.object_context.additional_properties
    assert isinstance(additional, DereferencedSchemaAdditionalProperties)
    assert isinstance(additional.value, DereferencedStringSchema)


def test_array_items_failure_propagates():
    schema = ArraySchema(context=ArrayContext(items=ReferenceSchema.component("Gone")))

    with pytest.raises(MissingComponentError) as exc_info:
        dereference(schema, ComponentsRegistry.empty())

    assert exc_info.value.path == ["items"]


def test_optional_reference_stays_optional(simple_registry):
    schema = ObjectSchema(
        context=ObjectContext(
            properties={
                "nickname": ReferenceSchema.component("Name", required=False),
                "name": ReferenceSchema.component("Name"),
            }
        )
    )

    result = dereference(schema, simple_registry)

    assert result.object_context.required_properties == ["name"]
    assert result.object_context.optional_properties == ["nickname"]


def test_all_of_is_combined_and_takes_discriminator(simple_registry):
    discriminator = Discriminator(property_name="petType")
    schema = AllOfSchema(
        core=CoreContext(discriminator=discriminator),
        schemas=[
            ReferenceSchema.component("Person"),
            ObjectSchema(
                context=ObjectContext(
                    properties={"petType": StringSchema()},
                )
            ),
        ],
    )

    result = dereference(schema, simple_registry)

    assert isinstance(result, DereferencedObjectSchema)
    assert result.discriminator == discriminator
    assert list(result.context.properties) == ["name", "age", "petType"]


def test_all_of_without_discriminator_has_none():
    schema = AllOfSchema(
        schemas=[
            StringSchema(core=CoreContext(discriminator=Discriminator(property_name="x"))),
            StringSchema(context=StringContext(max_length=3)),
        ]
    )

    result = dereference(schema, ComponentsRegistry.empty())

    assert isinstance(result, DereferencedStringSchema)
    assert result.discriminator is None
    assert result.context.max_length == 3


def test_optional_all_of_stays_optional():
    schema = ObjectSchema(
        context=ObjectContext(
            properties={
                "extra": AllOfSchema(
                    core=CoreContext(required=False),
                    schemas=[StringSchema(), FragmentSchema()],
                )
            }
        )
    )

    result = dereference(schema, ComponentsRegistry.empty())

    assert result.object_context.optional_properties == ["extra"]


def test_all_of_failure_carries_location():
    schema = ObjectSchema(
        context=ObjectContext(
            properties={
                "value": AllOfSchema(schemas=[StringSchema(), IntegerSchema()]),
            }
        )
    )

    with pytest.raises(FragmentCombinationError) as exc_info:
        dereference(schema, ComponentsRegistry.empty())

    assert exc_info.value.path == ["properties", "value"]
    assert exc_info.value.kinds == ["string", "integer"]


def test_all_of_required_list_marks_referenced_property_required(schema_helper):
    registry = decode_components(
        schema_helper.document(
            {
                "Pet": schema_helper.object_schema(
                    {"id": {"type": "integer"}, "name": {"type": "string"}},
                    required=["name"],
                ),
                "StoredPet": {"allOf": [schema_helper.ref("Pet"), {"required": ["id"]}]},
            }
        )
    )

    result = SchemaResolver(registry).dereference_component("StoredPet")

    assert isinstance(result, DereferencedObjectSchema)
    assert result.object_context.required_properties == ["id", "name"]
    assert isinstance(result.object_context.properties["id"], DereferencedIntegerSchema)


class TestDereferenceLocal:
    """dereference_local reports absence instead of failing."""

    def test_reference_free_tree(self):
        tree = reference_free_tree()

        result = dereference_local(tree)

        assert result is not None
        assert result.project_to_schema() == tree

    def test_top_level_reference(self):
        assert dereference_local(ReferenceSchema.component("Pet")) is None

    def test_deeply_nested_reference(self):
        tree = ArraySchema(
            context=ArrayContext(
                items=ObjectSchema(
                    context=ObjectContext(
                        properties={
                            "inner": OneOfSchema(
                                schemas=[
                                    StringSchema(),
                                    NotSchema(negated=ReferenceSchema.component("X")),
                                ]
                            )
                        }
                    )
                )
            )
        )

        assert dereference_local(tree) is None

    def test_remote_reference(self):
        schema = ReferenceSchema(reference=SchemaReference(target="https://x/y.json"))

        assert dereference_local(schema) is None

    def test_all_of_is_combined(self):
        schema = AllOfSchema(
            schemas=[
                StringSchema(context=StringContext(explicit_min_length=1)),
                StringSchema(context=StringContext(max_length=5)),
            ]
        )

        result = dereference_local(schema)

        assert isinstance(result, DereferencedStringSchema)
        assert result.context.min_length == 1
        assert result.context.max_length == 5
