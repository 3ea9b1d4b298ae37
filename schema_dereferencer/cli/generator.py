"""Main class that orchestrates dereferencing of a document's components."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

from schema_dereferencer.core.config import config
from schema_dereferencer.core.exceptions import (
    CyclicReferenceError,
    SchemaDecodingError,
    SchemaDereferenceError,
    ValidationError,
)
from schema_dereferencer.core.schemas import ComponentSpec
from schema_dereferencer.io.output_manager import OutputManager
from schema_dereferencer.logger import logger, setup_logger
from schema_dereferencer.resolution.resolver import SchemaResolver
from schema_dereferencer.schema.codec import decode_components, encode_dereferenced
from schema_dereferencer.schema.components import ComponentsRegistry
from schema_dereferencer.validation.schema_validator import SchemaValidator


class DereferenceGenerator:
    """Main class that orchestrates the dereferencing process.

    This class loads an OpenAPI document, dereferences every schema of its
    components registry, validates the results and writes one file per
    component plus an index.
    """

    def __init__(
        self,
        input_file: Path = config.input_file,
        output_path: Path = config.output_dir,
    ) -> None:
        """Initialize the generator.

        Args:
            input_file: OpenAPI document (JSON) to read components from
            output_path: Path for generated output files
        """
        self.input_file = input_file
        self.output_path = output_path
        self.output_manager = OutputManager(output_path)
        self.validator = SchemaValidator()

    def run(self) -> None:
        """Run the complete dereferencing process.

        Raises:
            SystemExit: If any critical error occurs during generation
        """
        try:
            setup_logger(config.log_level)
            logger.info("Dereferencing components of %s...", self.input_file)
            generated_files = self.generate_all_components()
            logger.info(
                "Generation completed successfully! Generated %d file(s).",
                len(generated_files),
            )
        except CyclicReferenceError as e:
            logger.error("Cyclic component reference: %s", e)
            sys.exit(config.exit_codes.error_cyclic_reference)
        except ValidationError as e:
            logger.error("Generated schema is invalid: %s", e)
            sys.exit(config.exit_codes.error_validation_failed)
        except SchemaDereferenceError as e:
            logger.error("Schema dereferencing error: %s", e, exc_info=True)
            sys.exit(config.exit_codes.error_invalid_schema)
        except FileNotFoundError as e:
            logger.error("Missing required input file: %s", e, exc_info=True)
            sys.exit(config.exit_codes.error_file_not_found)
        except Exception:
            logger.exception("Unexpected error occurred")
            sys.exit(config.exit_codes.error_file_system)

    def run_for_testing(self) -> list[Path]:
        """Run the complete dereferencing process for testing.

        Unlike run(), this method raises exceptions instead of calling sys.exit(),
        making it suitable for unit tests.

        Returns:
            List of paths where files were written

        Raises:
            SchemaDereferenceError: If any component cannot be dereferenced
            FileNotFoundError: If the input document is missing
        """
        logger.info("Dereferencing components of %s...", self.input_file)
        return self.generate_all_components()

    def load_registry(self) -> ComponentsRegistry:
        """Load the input document and decode its components registry.

        Raises:
            FileNotFoundError: If the input document does not exist
            SchemaDecodingError: If the document is not valid JSON or its schemas are invalid
        """
        if not self.input_file.exists():
            raise FileNotFoundError(f"Input document not found: {self.input_file}")

        try:
            with open(self.input_file, "r", encoding="utf-8") as f:
                document: Any = json.load(f)
        except json.JSONDecodeError as e:
            raise SchemaDecodingError(f"invalid JSON: {e}") from e

        if not isinstance(document, dict):
            raise SchemaDecodingError("document must be a JSON object")
        return decode_components(document)

    def generate_all_components(self) -> list[Path]:
        """Dereference and write every component of the input document.

        Returns:
            List of paths where files were written
        """
        registry = self.load_registry()
        self.output_manager.create_output_structure()

        resolver = SchemaResolver(registry)
        components = [ComponentSpec(name=name) for name in registry.names()]

        generated_files: list[Path] = []
        for component in components:
            logger.info("Dereferencing component %s", component)
            generated_files.append(self.generate_component(resolver, component))

        index_path = self.output_manager.write_index(components, config.base_url)
        generated_files.append(index_path)
        logger.info("Component index written to: %s", index_path)

        return generated_files

    def generate_component(
        self, resolver: SchemaResolver, component: ComponentSpec
    ) -> Path:
        """Dereference, validate and write a single component.

        Args:
            resolver: Resolver bound to the document's components registry
            component: Component to generate

        Returns:
            Path where the schema was written
        """
        dereferenced = resolver.dereference_component(component.name)
        schema = encode_dereferenced(dereferenced)

        validation_result = self.validator.validate_schema(schema)
        if not validation_result.is_valid:
            raise ValidationError(validation_result.errors)
        for warning in validation_result.warnings:
            logger.debug("%s: %s", component, warning)

        return self.output_manager.write_component(
            schema, component, config.base_url
        )
