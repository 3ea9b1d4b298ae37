"""File system operations for output generation."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from schema_dereferencer.core.config import config
from schema_dereferencer.core.schemas import ComponentSpec


class OutputManager:
    """Manages file system operations for output generation.

    This class handles creating the output directory and writing dereferenced
    component schemas, plus an index of the written components.
    """

    def __init__(self, output_dir: Path = config.output_dir) -> None:
        """Initialize the output manager.

        Args:
            output_dir: Base directory for output files
        """
        self.output_dir = output_dir

    def create_output_structure(self) -> None:
        """Create the base output directory.

        Raises:
            PermissionError: If unable to create directories
        """
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except Exception as e:
            raise PermissionError(
                f"Failed to create output directory {self.output_dir}: {e}"
            ) from e

    def write_component(
        self, schema: dict[str, Any], component: ComponentSpec, base_url: str = ""
    ) -> Path:
        """Write a dereferenced component schema with ``$id`` injected.

        Args:
            schema: Encoded dereferenced schema to write
            component: The component the schema belongs to
            base_url: Base URL for ``$id`` injection (optional)

        Returns:
            Path where the file was written

        Raises:
            PermissionError: If unable to write file
        """
        output_path = self._get_output_path(component)
        document: dict[str, Any] = {
            config.output_fields.id_field: self._get_component_url(
                component, base_url
            )
        }
        document.update(schema)
        self._write_json(document, output_path)
        return output_path

    def write_index(self, components: list[ComponentSpec], base_url: str = "") -> Path:
        """Write the index of generated components.

        The index maps each component name to the URL of its output file.

        Args:
            components: Components that were written, in declaration order
            base_url: Base URL to prepend to component URLs (optional)

        Returns:
            Path where the index file was written

        Raises:
            PermissionError: If unable to write file
        """
        index = {
            config.output_fields.index_components_key: {
                component.name: self._get_component_url(component, base_url)
                for component in components
            }
        }
        index_path = self.output_dir / config.file_names.components_index_file
        self._write_json(index, index_path)
        return index_path

    def _get_output_path(self, component: ComponentSpec) -> Path:
        return self.output_dir / config.file_names.component_file_pattern.format(
            name=component.name
        )

    def _get_component_url(self, component: ComponentSpec, base_url: str = "") -> str:
        """Get the URL of a component's output file.

        Args:
            component: The component
            base_url: Base URL to prepend (optional)

        Returns:
            URL pointing to the component file
        """
        relative_path = config.file_names.component_file_pattern.format(
            name=component.name
        )
        if base_url:
            return f"{base_url.rstrip('/')}/{relative_path}"
        return relative_path

    def _write_json(self, content: dict[str, Any], path: Path) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                json.dump(content, f, indent=2, ensure_ascii=False)
        except Exception as e:
            raise PermissionError(f"Failed to write {path}: {e}") from e
