"""Component reference resolver for schema trees."""

from __future__ import annotations

from schema_dereferencer.core.exceptions import (
    CyclicReferenceError,
    FragmentCombinationError,
    MissingComponentError,
    SchemaDereferenceError,
    UnresolvableRemoteReferenceError,
    format_path,
)
from schema_dereferencer.logger import logger
from schema_dereferencer.resolution.fragment_combiner import FragmentCombiner
from schema_dereferencer.resolution.interfaces import IComponentLookup
from schema_dereferencer.schema.components import ComponentsRegistry
from schema_dereferencer.schema.dereferenced import (
    DereferencedAdditionalProperties,
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
    StringSchema,
)


class SchemaResolver:
    """Handles dereferencing of component references in schema trees.

    This resolver walks a schema depth first, left to right, replacing every
    component reference with the dereferenced component and combining the
    fragments of every allOf into a single schema. The first failure aborts
    the walk; no partial result is produced.
    """

    def __init__(
        self,
        components: IComponentLookup,
        combiner: FragmentCombiner | None = None,
    ) -> None:
        """Initialize the schema resolver.

        Args:
            components: Registry used to look up referenced components
            combiner: Combiner used for allOf fragments
        """
        self.components = components
        self.combiner = combiner or FragmentCombiner()
        self.resolution_stack: list[str] = []

    def dereference(self, schema: JSONSchema) -> DereferencedJSONSchema:
        """Dereference a schema against the components registry.

        Args:
            schema: Schema that may contain references

        Returns:
            The reference-free equivalent of the schema

        Raises:
            UnresolvableRemoteReferenceError: If a reference points outside the registry
            MissingComponentError: If a referenced component does not exist
            CyclicReferenceError: If a component resolves back into itself
            FragmentCombinationError: If allOf fragments cannot be combined
        """
        return self._dereference(schema, [])

    def dereference_component(self, name: str) -> DereferencedJSONSchema:
        """Dereference the component registered under the given name.

        The component itself counts as being resolved, so a component that
        refers back to itself is reported with the shortest cycle.
        """
        return self._resolve_reference(ReferenceSchema.component(name), [])

    def detect_cyclic_reference(self, name: str) -> bool:
        """Check if resolving this component would revisit one in progress.

        Args:
            name: The component name to check

        Returns:
            True if this would create a cyclic reference, False otherwise
        """
        return name in self.resolution_stack

    def _dereference(
        self, schema: JSONSchema, path: list[str]
    ) -> DereferencedJSONSchema:
        if isinstance(schema, ReferenceSchema):
            return self._resolve_reference(schema, path)
        if isinstance(schema, BooleanSchema):
            return DereferencedBooleanSchema(core=schema.core)
        if isinstance(schema, NumberSchema):
            return DereferencedNumberSchema(core=schema.core, context=schema.context)
        if isinstance(schema, IntegerSchema):
            return DereferencedIntegerSchema(core=schema.core, context=schema.context)
        if isinstance(schema, StringSchema):
            return DereferencedStringSchema(core=schema.core, context=schema.context)
        if isinstance(schema, FragmentSchema):
            return DereferencedFragmentSchema(core=schema.core)
        if isinstance(schema, ObjectSchema):
            return DereferencedObjectSchema(
                core=schema.core,
                context=self._dereference_object_context(schema.context, path),
            )
        if isinstance(schema, ArraySchema):
            return DereferencedArraySchema(
                core=schema.core,
                context=self._dereference_array_context(schema.context, path),
            )
        if isinstance(schema, OneOfSchema):
            return DereferencedOneOfSchema(
                core=schema.core,
                schemas=self._dereference_members(schema.schemas, [*path, "oneOf"]),
            )
        if isinstance(schema, AnyOfSchema):
            return DereferencedAnyOfSchema(
                core=schema.core,
                schemas=self._dereference_members(schema.schemas, [*path, "anyOf"]),
            )
        if isinstance(schema, NotSchema):
            return DereferencedNotSchema(
                core=schema.core,
                negated=self._dereference(schema.negated, [*path, "not"]),
            )
        if isinstance(schema, AllOfSchema):
            return self._resolve_all_of(schema, path)

        raise TypeError(f"Unsupported schema node: {type(schema).__name__}")

    def _resolve_reference(
        self, schema: ReferenceSchema, path: list[str]
    ) -> DereferencedJSONSchema:
        name = schema.reference.component_name
        if name is None:
            raise UnresolvableRemoteReferenceError(schema.reference.target, path)
        if self.detect_cyclic_reference(name):
            raise CyclicReferenceError(self.resolution_stack + [name])

        target = self.components.lookup(name)
        if target is None:
            raise MissingComponentError(name, path)

        self.resolution_stack.append(name)
        try:
            logger.debug("Resolving component '%s' at %s", name, format_path(path))
            resolved = self._dereference(target, path)
        finally:
            self.resolution_stack.pop()

        # An optional position stays optional whatever the component says.
        if not schema.required:
            resolved = resolved.with_required(False)
        return resolved

    def _resolve_all_of(
        self, schema: AllOfSchema, path: list[str]
    ) -> DereferencedJSONSchema:
        fragments = self._dereference_members(schema.schemas, [*path, "allOf"])
        try:
            combined = self.combiner.combine(fragments)
        except FragmentCombinationError as e:
            raise e.at(*path) from e

        if schema.discriminator is not None:
            combined = combined.with_discriminator(schema.discriminator)
        return combined.with_required(schema.required)

    def _dereference_members(
        self, schemas: list[JSONSchema], path: list[str]
    ) -> list[DereferencedJSONSchema]:
        return [
            self._dereference(member, [*path, str(index)])
            for index, member in enumerate(schemas)
        ]

    def _dereference_object_context(
        self, context: ObjectContext, path: list[str]
    ) -> DereferencedObjectContext:
        properties = {
            name: self._dereference(schema, [*path, "properties", name])
            for name, schema in context.properties.items()
        }

        additional_properties: DereferencedAdditionalProperties | None
        if isinstance(context.additional_properties, BooleanAdditionalProperties):
            additional_properties = context.additional_properties
        elif context.additional_properties is not None:
            additional_properties = DereferencedSchemaAdditionalProperties(
                value=self._dereference(
                    context.additional_properties.value,
                    [*path, "additionalProperties"],
                )
            )
        else:
            additional_properties = None

        return DereferencedObjectContext(
            properties=properties,
            additional_properties=additional_properties,
            max_properties=context.max_properties,
            explicit_min_properties=context.explicit_min_properties,
        )

    def _dereference_array_context(
        self, context: ArrayContext, path: list[str]
    ) -> DereferencedArrayContext:
        return DereferencedArrayContext(
            items=self._dereference(context.items, [*path, "items"])
            if context.items is not None
            else None,
            max_items=context.max_items,
            explicit_min_items=context.explicit_min_items,
            explicit_unique_items=context.explicit_unique_items,
        )


def dereference(
    schema: JSONSchema, components: IComponentLookup
) -> DereferencedJSONSchema:
    """Dereference a schema against a components registry.

    Raises:
        SchemaDereferenceError: On the first reference or combination failure
    """
    return SchemaResolver(components).dereference(schema)


def dereference_local(schema: JSONSchema) -> DereferencedJSONSchema | None:
    """Dereference a schema that is expected to contain no references.

    Runs the same walk as ``dereference`` against a registry without
    components, so any reference in the tree makes the result None.
    """
    try:
        return SchemaResolver(ComponentsRegistry.empty()).dereference(schema)
    except SchemaDereferenceError as e:
        logger.debug("Schema cannot be dereferenced locally: %s", e)
        return None
