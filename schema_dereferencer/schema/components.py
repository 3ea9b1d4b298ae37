"""Components registry: the named, reusable schemas of a document."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from schema_dereferencer.schema.json_schema import JSONSchema


class ComponentsRegistry(BaseModel):
    """Read-only mapping of component names to schemas."""

    model_config = ConfigDict(frozen=True)

    schemas: dict[str, JSONSchema] = Field(default_factory=dict)

    @classmethod
    def empty(cls) -> ComponentsRegistry:
        """A registry without components; every lookup reports absence."""
        return cls()

    def lookup(self, name: str) -> JSONSchema | None:
        return self.schemas.get(name)

    def names(self) -> list[str]:
        """Component names in declaration order."""
        return list(self.schemas)

    def __contains__(self, name: object) -> bool:
        return name in self.schemas
