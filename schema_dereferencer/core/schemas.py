"""Pydantic models for type-safe data validation and parsing."""

from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator

# Component keys allowed by the OpenAPI 3.0 Components Object
COMPONENT_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9.\-_]+$")


class ComponentSpec(BaseModel):
    """Pydantic model for a named entry of the components registry.

    Provides type safety and validation for component names read from a document.
    """

    name: str = Field(..., min_length=1, description="Component name")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate component name format."""
        if not COMPONENT_NAME_PATTERN.match(v):
            raise ValueError(
                "Component name must contain only alphanumeric characters, dots, hyphens, and underscores"
            )
        return v

    def __str__(self) -> str:
        return self.name


class ValidationResult(BaseModel):
    """Result of schema validation with type safety.

    Provides validated results for schema validation operations.
    """

    is_valid: bool = Field(..., description="Whether the schema passed validation")
    errors: list[str] = Field(
        default_factory=list, description="Validation error messages"
    )
    warnings: list[str] = Field(
        default_factory=list, description="Validation warning messages"
    )

    def add_error(self, message: str) -> None:
        """Add an error message to the validation result."""
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str) -> None:
        """Add a warning message to the validation result."""
        self.warnings.append(message)
