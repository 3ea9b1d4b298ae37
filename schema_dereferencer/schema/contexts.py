"""Contexts shared by the reference-capable and the dereferenced schema trees."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Discriminator(BaseModel):
    """Identifies which member of a polymorphic schema a value belongs to."""

    model_config = ConfigDict(frozen=True)

    property_name: str = Field(..., min_length=1)
    mapping: dict[str, str] | None = None


class ExternalDocumentation(BaseModel):
    """Pointer to documentation that lives outside the document."""

    model_config = ConfigDict(frozen=True)

    url: str
    description: str | None = None


class CoreContext(BaseModel):
    """Metadata carried by every typed schema node.

    ``required`` describes the node's position rather than the node itself: a
    property schema is required when its parent object requires it.
    """

    model_config = ConfigDict(frozen=True)

    format: str | None = None
    required: bool = True
    nullable: bool = False
    title: str | None = None
    description: str | None = None
    default: Any = None
    example: Any = None
    discriminator: Discriminator | None = None
    external_docs: ExternalDocumentation | None = None
    allowed_values: list[Any] | None = None
    read_only: bool = False
    write_only: bool = False
    deprecated: bool = False

    def with_discriminator(self, discriminator: Discriminator) -> CoreContext:
        return self.model_copy(update={"discriminator": discriminator})

    def with_required(self, required: bool) -> CoreContext:
        return self.model_copy(update={"required": required})


class NumericContext(BaseModel):
    """Constraints that only apply to ``number`` schemas."""

    model_config = ConfigDict(frozen=True)

    multiple_of: float | None = None
    maximum: float | None = None
    exclusive_maximum: bool = False
    minimum: float | None = None
    exclusive_minimum: bool = False


class IntegerContext(BaseModel):
    """Constraints that only apply to ``integer`` schemas."""

    model_config = ConfigDict(frozen=True)

    multiple_of: int | None = None
    maximum: int | None = None
    exclusive_maximum: bool = False
    minimum: int | None = None
    exclusive_minimum: bool = False


class StringContext(BaseModel):
    """Constraints that only apply to ``string`` schemas."""

    model_config = ConfigDict(frozen=True)

    max_length: int | None = None
    explicit_min_length: int | None = None
    pattern: str | None = None

    @property
    def min_length(self) -> int:
        """Minimum string length, 0 when not stated."""
        return self.explicit_min_length or 0
