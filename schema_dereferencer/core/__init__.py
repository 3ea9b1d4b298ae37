"""Core data models and shared types."""

from schema_dereferencer.core.exceptions import (
    ConfigurationError,
    CyclicReferenceError,
    FragmentCombinationError,
    MissingComponentError,
    SchemaDecodingError,
    SchemaDereferenceError,
    UnresolvableRemoteReferenceError,
    ValidationError,
)
from schema_dereferencer.core.schemas import ComponentSpec, ValidationResult

__all__ = [
    "ComponentSpec",
    "ValidationResult",
    "SchemaDereferenceError",
    "UnresolvableRemoteReferenceError",
    "MissingComponentError",
    "CyclicReferenceError",
    "FragmentCombinationError",
    "SchemaDecodingError",
    "ConfigurationError",
    "ValidationError",
]
