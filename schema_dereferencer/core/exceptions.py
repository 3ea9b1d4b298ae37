"""Custom exception classes for the OpenAPI schema dereferencer."""

from __future__ import annotations

from collections.abc import Sequence


def format_path(path: Sequence[str]) -> str:
    """Render a schema location as a slash separated pointer (``/`` for the root)."""
    return "/" + "/".join(path)


class SchemaDereferenceError(Exception):
    """Base exception for schema dereferencing errors.

    All custom exceptions in the schema dereferencer inherit from this class.
    """

    pass


class UnresolvableRemoteReferenceError(SchemaDereferenceError):
    """Error when a reference points outside the components registry.

    Raised before any lookup is attempted for references into another document,
    another file, or a location of the same document that is not a component.

    Args:
        target: The reference target that cannot be looked up
        path: Location of the reference inside the schema being dereferenced
    """

    def __init__(self, target: str, path: Sequence[str] = ()) -> None:
        self.target = target
        self.path = list(path)
        super().__init__(
            f"Cannot look up remote reference '{target}' at {format_path(self.path)}"
        )


class MissingComponentError(SchemaDereferenceError):
    """Error when a referenced component is absent from the registry.

    Args:
        name: The component name that could not be found
        path: Location of the reference inside the schema being dereferenced
    """

    def __init__(self, name: str, path: Sequence[str] = ()) -> None:
        self.name = name
        self.path = list(path)
        super().__init__(
            f"Component '{name}' referenced at {format_path(self.path)} "
            "is missing from the components registry"
        )


class CyclicReferenceError(SchemaDereferenceError):
    """Error when a component resolves back into itself.

    Raised when a component reference is revisited while it is still being
    resolved, which would otherwise cause unbounded recursion.

    Args:
        reference_chain: Component names showing the cyclic dependency path
    """

    def __init__(self, reference_chain: list[str]) -> None:
        self.reference_chain = reference_chain
        super().__init__(f"Cyclic reference detected: {' -> '.join(reference_chain)}")


class FragmentCombinationError(SchemaDereferenceError):
    """Error when the fragments of an allOf cannot be merged.

    Args:
        reason: Description of the incompatibility
        kinds: Schema kinds of the fragments that were being combined
        path: Location of the offending property, relative to the allOf
    """

    def __init__(
        self, reason: str, kinds: Sequence[str] = (), path: Sequence[str] = ()
    ) -> None:
        self.reason = reason
        self.kinds = list(kinds)
        self.path = list(path)
        message = f"Failed to combine allOf fragments: {reason}"
        if self.kinds:
            message += f" (fragment kinds: {', '.join(self.kinds)})"
        if self.path:
            message += f" at {format_path(self.path)}"
        super().__init__(message)

    def at(self, *segments: str) -> FragmentCombinationError:
        """Return a copy of this error located below the given path segments."""
        return FragmentCombinationError(self.reason, self.kinds, [*segments, *self.path])


class SchemaDecodingError(SchemaDereferenceError):
    """Error when a JSON document cannot be decoded into a schema tree.

    Args:
        reason: Why the value could not be decoded
        path: Location of the value inside the document
    """

    def __init__(self, reason: str, path: Sequence[str] = ()) -> None:
        self.reason = reason
        self.path = list(path)
        super().__init__(f"Invalid schema at {format_path(self.path)}: {reason}")


class ValidationError(SchemaDereferenceError):
    """Error during output schema validation.

    Raised when a generated schema fails validation with one or more errors.

    Args:
        errors: List of validation error messages
    """

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__(f"Schema validation failed: {'; '.join(errors)}")


class ConfigurationError(SchemaDereferenceError):
    """Error in application configuration.

    Raised when required configuration values are missing or invalid,
    such as missing environment variables.

    Args:
        variable_name: The name of the configuration variable that caused the error
    """

    def __init__(self, variable_name: str) -> None:
        self.variable_name = variable_name
        message = f"Required configuration variable '{variable_name}' is not set"
        super().__init__(message)
