"""Validation of dereferenced output schemas."""

from __future__ import annotations

from typing import Any

import jsonschema
from jsonschema import Draft4Validator

from schema_dereferencer.core.constants import REF_FIELD
from schema_dereferencer.core.schemas import ValidationResult


class SchemaValidator:
    """Validates encoded dereferenced schemas before they are written.

    OpenAPI 3.0 schema objects extend JSON Schema Draft 4 (boolean
    ``exclusiveMinimum``/``exclusiveMaximum``), so the structural check uses
    the Draft 4 meta-schema, which ignores OpenAPI-only keywords. On top of
    that a dereferenced schema must not contain any ``$ref``.
    """

    def validate_schema(self, schema: dict[str, Any]) -> ValidationResult:
        """Validate an encoded schema.

        Args:
            schema: Schema to validate

        Returns:
            ValidationResult with validation status and any errors/warnings
        """
        result = ValidationResult(is_valid=True)

        try:
            Draft4Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            result.add_error(f"JSON Schema validation failed: {e.message}")

        self._check_unresolved_refs(schema, result, "")
        self._check_object_properties(schema, result)

        if "title" not in schema:
            result.add_warning("Missing 'title' field - recommended for documentation")

        return result

    def _check_object_properties(
        self, schema: dict[str, Any], result: ValidationResult
    ) -> None:
        """Check that every required name of an object has a property schema."""
        properties = schema.get("properties", {})
        if not isinstance(properties, dict):
            return
        for name in schema.get("required", []):
            if name not in properties:
                result.add_error(f"Required property '{name}' has no schema")

    def _check_unresolved_refs(
        self, obj: Any, result: ValidationResult, path: str
    ) -> None:
        """Recursively check for references left in the schema.

        Args:
            obj: Object to check
            result: Result to record errors on
            path: Current path in the object tree for error reporting
        """
        if isinstance(obj, dict):
            for key, value in obj.items():
                current_path = f"{path}.{key}" if path else str(key)
                if key == REF_FIELD and isinstance(value, str):
                    result.add_error(
                        f"Unresolved reference found at {current_path}: {value}"
                    )
                else:
                    self._check_unresolved_refs(value, result, current_path)
        elif isinstance(obj, list):
            for i, item in enumerate(obj):
                current_path = f"{path}[{i}]" if path else f"[{i}]"
                self._check_unresolved_refs(item, result, current_path)
