from typing import Protocol

from schema_dereferencer.schema.json_schema import JSONSchema


class IComponentLookup(Protocol):
    def lookup(self, name: str) -> JSONSchema | None: ...
