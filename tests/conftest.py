"""Test fixtures and configuration."""

# Set test environment variables BEFORE any imports that might trigger config loading
import os  # noqa: E402

os.environ.setdefault("BASE_URL", "https://test.example.com/schemas")

import json
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict
from unittest.mock import Mock

import pytest

from schema_dereferencer.resolution.interfaces import IComponentLookup
from schema_dereferencer.schema.codec import decode_components
from schema_dereferencer.schema.components import ComponentsRegistry
from schema_dereferencer.schema.contexts import CoreContext, StringContext
from schema_dereferencer.schema.json_schema import (
    IntegerSchema,
    ObjectContext,
    ObjectSchema,
    ReferenceSchema,
    StringSchema,
)


def petstore_document() -> Dict[str, Any]:
    """A small OpenAPI document exercising references and allOf."""
    return {
        "openapi": "3.0.3",
        "info": {"title": "Petstore", "version": "1.0.0"},
        "paths": {},
        "components": {
            "schemas": {
                "Identifier": {"type": "integer", "format": "int64", "minimum": 1},
                "Tag": {
                    "title": "Tag",
                    "type": "object",
                    "properties": {
                        "id": {"$ref": "#/components/schemas/Identifier"},
                        "name": {"type": "string", "maxLength": 64},
                    },
                    "required": ["name"],
                },
                "NewPet": {
                    "title": "New pet",
                    "type": "object",
                    "properties": {
                        "name": {"type": "string", "minLength": 1},
                        "tags": {
                            "type": "array",
                            "items": {"$ref": "#/components/schemas/Tag"},
                            "uniqueItems": True,
                        },
                    },
                    "required": ["name"],
                },
                "Pet": {
                    "title": "Pet",
                    "allOf": [
                        {"$ref": "#/components/schemas/NewPet"},
                        {
                            "type": "object",
                            "properties": {
                                "id": {"$ref": "#/components/schemas/Identifier"}
                            },
                            "required": ["id"],
                        },
                    ],
                },
                "Pets": {
                    "title": "Pets",
                    "type": "array",
                    "items": {"$ref": "#/components/schemas/Pet"},
                },
            }
        },
    }


@pytest.fixture
def petstore():
    """The petstore document as parsed JSON."""
    return petstore_document()


@pytest.fixture
def petstore_registry(petstore):
    """Components registry decoded from the petstore document."""
    return decode_components(petstore)


@pytest.fixture
def simple_registry():
    """Registry with a chain of references ending in a concrete schema."""
    return ComponentsRegistry(
        schemas={
            "Name": StringSchema(
                core=CoreContext(title="Name"),
                context=StringContext(max_length=32),
            ),
            "Alias": ReferenceSchema.component("Name"),
            "AliasOfAlias": ReferenceSchema.component("Alias"),
            "Person": ObjectSchema(
                core=CoreContext(title="Person"),
                context=ObjectContext(
                    properties={
                        "name": ReferenceSchema.component("AliasOfAlias"),
                        "age": IntegerSchema(core=CoreContext(required=False)),
                    }
                ),
            ),
        }
    )


@pytest.fixture
def temp_document(tmp_path):
    """Write the petstore document to a temporary file."""
    document_path = tmp_path / "openapi.json"
    with open(document_path, "w", encoding="utf-8") as f:
        json.dump(petstore_document(), f, indent=2)
    return document_path


@pytest.fixture
def temp_output_dir():
    """Create a temporary output directory."""
    temp_dir = Path(tempfile.mkdtemp())
    yield temp_dir
    shutil.rmtree(temp_dir)


@pytest.fixture
def mock_lookup():
    """Mock registry that implements the lookup interface and knows no components."""
    mock = Mock(spec=IComponentLookup)
    mock.lookup.return_value = None
    return mock


class SchemaTestHelper:
    """Helper class for creating test schemas."""

    @staticmethod
    def object_schema(
        properties: Dict[str, Any], required: list[str] | None = None, **extra: Any
    ) -> Dict[str, Any]:
        """Create an object schema object."""
        schema: Dict[str, Any] = {"type": "object", "properties": properties}
        if required:
            schema["required"] = required
        schema.update(extra)
        return schema

    @staticmethod
    def ref(name: str) -> Dict[str, Any]:
        """Create a reference to a component."""
        return {"$ref": f"#/components/schemas/{name}"}

    @staticmethod
    def document(schemas: Dict[str, Any]) -> Dict[str, Any]:
        """Wrap component schemas in a minimal OpenAPI document."""
        return {
            "openapi": "3.0.3",
            "info": {"title": "Test", "version": "1.0.0"},
            "paths": {},
            "components": {"schemas": schemas},
        }


@pytest.fixture
def schema_helper():
    """Provide schema helper for tests."""
    return SchemaTestHelper()
