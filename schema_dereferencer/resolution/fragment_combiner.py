"""Combination of allOf fragments into one concrete schema."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any, TypeVar

from schema_dereferencer.core.exceptions import FragmentCombinationError
from schema_dereferencer.schema.contexts import (
    CoreContext,
    IntegerContext,
    NumericContext,
    StringContext,
)
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
from schema_dereferencer.schema.json_schema import BooleanAdditionalProperties

T = TypeVar("T")
NumericContextT = TypeVar("NumericContextT", NumericContext, IntegerContext)


class FragmentCombiner:
    """Merges the dereferenced fragments of an allOf into a single schema.

    Untyped fragments combine with anything. Fragments of one concrete type are
    merged field by field, keeping the most restrictive constraints. Fragments
    of different concrete types cannot all hold for the same value, so they
    are rejected. oneOf, anyOf and not fragments cannot be flattened into a
    single node; one of them is kept only when the other fragments are untyped.

    The combined schema never carries a discriminator.
    """

    def combine(
        self, fragments: Sequence[DereferencedJSONSchema]
    ) -> DereferencedJSONSchema:
        """Combine fragments into one schema.

        Args:
            fragments: Dereferenced fragments in allOf order

        Returns:
            The combined schema

        Raises:
            FragmentCombinationError: If the fragments are incompatible
        """
        kinds = [fragment.kind for fragment in fragments]

        composites = [
            fragment
            for fragment in fragments
            if isinstance(
                fragment,
                (DereferencedOneOfSchema, DereferencedAnyOfSchema, DereferencedNotSchema),
            )
        ]
        if composites:
            return self._combine_composite(fragments, composites, kinds)

        concrete = [
            fragment
            for fragment in fragments
            if not isinstance(fragment, DereferencedFragmentSchema)
        ]
        concrete_kinds = list(dict.fromkeys(fragment.kind for fragment in concrete))
        if len(concrete_kinds) > 1:
            raise FragmentCombinationError(
                f"conflicting types {' and '.join(concrete_kinds)}", kinds
            )

        core = self._combine_cores([fragment.core for fragment in fragments], kinds)

        if not concrete:
            return DereferencedFragmentSchema(core=core)

        first = concrete[0]
        if isinstance(first, DereferencedBooleanSchema):
            return DereferencedBooleanSchema(core=core)
        if isinstance(first, DereferencedObjectSchema):
            return DereferencedObjectSchema(
                core=core,
                context=self._combine_object_contexts(
                    [fragment.context for fragment in concrete], kinds
                ),
            )
        if isinstance(first, DereferencedArraySchema):
            return DereferencedArraySchema(
                core=core,
                context=self._combine_array_contexts(
                    [fragment.context for fragment in concrete], kinds
                ),
            )
        if isinstance(first, DereferencedNumberSchema):
            return DereferencedNumberSchema(
                core=core,
                context=self._combine_numeric_contexts(
                    [fragment.context for fragment in concrete], NumericContext, kinds
                ),
            )
        if isinstance(first, DereferencedIntegerSchema):
            return DereferencedIntegerSchema(
                core=core,
                context=self._combine_numeric_contexts(
                    [fragment.context for fragment in concrete], IntegerContext, kinds
                ),
            )
        if isinstance(first, DereferencedStringSchema):
            return DereferencedStringSchema(
                core=core,
                context=self._combine_string_contexts(
                    [fragment.context for fragment in concrete], kinds
                ),
            )

        raise FragmentCombinationError(f"'{first.kind}' fragments cannot be merged", kinds)

    def _combine_composite(
        self,
        fragments: Sequence[DereferencedJSONSchema],
        composites: list[DereferencedJSONSchema],
        kinds: list[str],
    ) -> DereferencedJSONSchema:
        """Keep a single composite when the other fragments only add metadata.

        Composites cannot be flattened, so the fragments may only hold one of
        them (repeated copies differing in the required flag count as one)
        next to untyped fragments.
        """
        composite = composites[0]
        for fragment in fragments:
            if isinstance(fragment, DereferencedFragmentSchema):
                continue
            if fragment.with_required(True) != composite.with_required(True):
                raise FragmentCombinationError(
                    f"'{composite.kind}' fragments cannot be merged", kinds
                )

        core = self._combine_cores([fragment.core for fragment in fragments], kinds)
        return composite.model_copy(update={"core": core})

    def _combine_cores(
        self, cores: list[CoreContext], kinds: list[str]
    ) -> CoreContext:
        formats = list(dict.fromkeys(c.format for c in cores if c.format is not None))
        if len(formats) > 1:
            raise FragmentCombinationError(
                f"conflicting formats {' and '.join(formats)}", kinds
            )

        allowed_values: list[Any] | None = None
        for core in cores:
            if core.allowed_values is None:
                continue
            if allowed_values is None:
                allowed_values = list(core.allowed_values)
            else:
                allowed_values = [v for v in allowed_values if v in core.allowed_values]
        if allowed_values is not None and not allowed_values:
            raise FragmentCombinationError("allowed values do not intersect", kinds)

        return CoreContext(
            format=formats[0] if formats else None,
            required=any(core.required for core in cores),
            nullable=any(core.nullable for core in cores),
            title=_last(core.title for core in cores),
            description=_last(core.description for core in cores),
            default=_last(core.default for core in cores),
            example=_last(core.example for core in cores),
            discriminator=None,
            external_docs=_last(core.external_docs for core in cores),
            allowed_values=allowed_values,
            read_only=any(core.read_only for core in cores),
            write_only=any(core.write_only for core in cores),
            deprecated=any(core.deprecated for core in cores),
        )

    def _combine_object_contexts(
        self, contexts: list[DereferencedObjectContext], kinds: list[str]
    ) -> DereferencedObjectContext:
        properties: dict[str, DereferencedJSONSchema] = {}
        for context in contexts:
            for name, schema in context.properties.items():
                existing = properties.get(name)
                if existing is None or existing == schema:
                    properties[name] = schema
                    continue
                try:
                    properties[name] = self.combine([existing, schema])
                except FragmentCombinationError as e:
                    raise e.at("properties", name) from e

        combined = DereferencedObjectContext(
            properties=properties,
            additional_properties=self._combine_additional_properties(
                [context.additional_properties for context in contexts]
            ),
            max_properties=_min(c.max_properties for c in contexts),
            explicit_min_properties=_max(c.explicit_min_properties for c in contexts),
        )
        if (
            combined.max_properties is not None
            and combined.min_properties > combined.max_properties
        ):
            raise FragmentCombinationError(
                f"minProperties {combined.min_properties} exceeds "
                f"maxProperties {combined.max_properties}",
                kinds,
            )
        return combined

    def _combine_additional_properties(
        self, values: list[DereferencedAdditionalProperties | None]
    ) -> DereferencedAdditionalProperties | None:
        result: DereferencedAdditionalProperties | None = None
        for value in values:
            if value is None:
                continue
            if result is None:
                result = value
            elif isinstance(result, BooleanAdditionalProperties) and not result.allowed:
                continue
            elif isinstance(value, BooleanAdditionalProperties):
                if not value.allowed:
                    result = value
            elif isinstance(result, BooleanAdditionalProperties):
                result = value
            else:
                try:
                    combined = self.combine([result.value, value.value])
                except FragmentCombinationError as e:
                    raise e.at("additionalProperties") from e
                result = DereferencedSchemaAdditionalProperties(value=combined)
        return result

    def _combine_array_contexts(
        self, contexts: list[DereferencedArrayContext], kinds: list[str]
    ) -> DereferencedArrayContext:
        items: DereferencedJSONSchema | None = None
        for context in contexts:
            if context.items is None:
                continue
            if items is None or items == context.items:
                items = context.items
                continue
            try:
                items = self.combine([items, context.items])
            except FragmentCombinationError as e:
                raise e.at("items") from e

        unique_flags = [
            c.explicit_unique_items for c in contexts if c.explicit_unique_items is not None
        ]
        combined = DereferencedArrayContext(
            items=items,
            max_items=_min(c.max_items for c in contexts),
            explicit_min_items=_max(c.explicit_min_items for c in contexts),
            explicit_unique_items=any(unique_flags) if unique_flags else None,
        )
        if combined.max_items is not None and combined.min_items > combined.max_items:
            raise FragmentCombinationError(
                f"minItems {combined.min_items} exceeds maxItems {combined.max_items}",
                kinds,
            )
        return combined

    def _combine_numeric_contexts(
        self,
        contexts: list[NumericContextT],
        context_type: type[NumericContextT],
        kinds: list[str],
    ) -> NumericContextT:
        multiples = list(
            dict.fromkeys(c.multiple_of for c in contexts if c.multiple_of is not None)
        )
        if len(multiples) > 1:
            raise FragmentCombinationError(
                f"conflicting multipleOf values {', '.join(str(m) for m in multiples)}",
                kinds,
            )

        minimum = None
        exclusive_minimum = False
        maximum = None
        exclusive_maximum = False
        for context in contexts:
            if context.minimum is not None:
                if minimum is None or context.minimum > minimum:
                    minimum, exclusive_minimum = context.minimum, context.exclusive_minimum
                elif context.minimum == minimum:
                    exclusive_minimum = exclusive_minimum or context.exclusive_minimum
            if context.maximum is not None:
                if maximum is None or context.maximum < maximum:
                    maximum, exclusive_maximum = context.maximum, context.exclusive_maximum
                elif context.maximum == maximum:
                    exclusive_maximum = exclusive_maximum or context.exclusive_maximum

        if minimum is not None and maximum is not None:
            if minimum > maximum or (
                minimum == maximum and (exclusive_minimum or exclusive_maximum)
            ):
                raise FragmentCombinationError(
                    f"minimum {minimum} and maximum {maximum} leave no valid value",
                    kinds,
                )

        return context_type(
            multiple_of=multiples[0] if multiples else None,
            maximum=maximum,
            exclusive_maximum=exclusive_maximum,
            minimum=minimum,
            exclusive_minimum=exclusive_minimum,
        )

    def _combine_string_contexts(
        self, contexts: list[StringContext], kinds: list[str]
    ) -> StringContext:
        patterns = list(dict.fromkeys(c.pattern for c in contexts if c.pattern is not None))
        if len(patterns) > 1:
            raise FragmentCombinationError("conflicting patterns", kinds)

        combined = StringContext(
            max_length=_min(c.max_length for c in contexts),
            explicit_min_length=_max(c.explicit_min_length for c in contexts),
            pattern=patterns[0] if patterns else None,
        )
        if combined.max_length is not None and combined.min_length > combined.max_length:
            raise FragmentCombinationError(
                f"minLength {combined.min_length} exceeds maxLength {combined.max_length}",
                kinds,
            )
        return combined


def _last(values: Iterable[T | None]) -> T | None:
    """Last value that is not None."""
    result = None
    for value in values:
        if value is not None:
            result = value
    return result


def _min(values: Iterable[int | None]) -> int | None:
    present = [value for value in values if value is not None]
    return min(present) if present else None


def _max(values: Iterable[int | None]) -> int | None:
    present = [value for value in values if value is not None]
    return max(present) if present else None
