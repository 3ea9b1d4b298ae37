"""Configuration for the OpenAPI schema dereferencer."""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings

from .exceptions import ConfigurationError


class FileNamesConfig(BaseModel):
    """Configuration for file names."""

    components_index_file: str = "index.json"
    component_file_pattern: str = "{name}.json"


class OutputFieldsConfig(BaseModel):
    """Configuration for field names of the written documents."""

    id_field: str = "$id"
    index_components_key: str = "components"


class ExitCodesConfig(BaseModel):
    """Configuration for exit codes."""

    success: int = 0
    error_file_not_found: int = 1
    error_invalid_schema: int = 2
    error_cyclic_reference: int = 3
    error_validation_failed: int = 4
    error_file_system: int = 5


class Config(BaseSettings):
    """Main configuration class for the OpenAPI schema dereferencer."""

    # Input document and output directory
    input_file: Path = Field(
        default=Path("openapi.json"), description="OpenAPI document to dereference"
    )
    output_dir: Path = Field(
        default=Path("output"), description="Path for generated output files"
    )

    # Base URL for generated component files (required from environment)
    base_url: str = Field(..., description="Base URL for generated schema files")

    # Optional override of the package logger level (e.g. "DEBUG")
    log_level: str | None = Field(default=None, description="Package log level")

    # Nested configurations
    file_names: FileNamesConfig = Field(default_factory=FileNamesConfig)
    output_fields: OutputFieldsConfig = Field(default_factory=OutputFieldsConfig)
    exit_codes: ExitCodesConfig = Field(default_factory=ExitCodesConfig)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }

    def __init__(self, **data):
        """Initialize config with custom error handling for missing required fields."""
        try:
            # BASE_URL must be present in the process environment (or passed in)
            # before delegating to BaseSettings.
            if "base_url" not in data and "BASE_URL" not in os.environ:
                raise ConfigurationError(variable_name="BASE_URL")

            super().__init__(**data)
        except ValidationError as e:
            # Only handle missing field errors, let other validation errors bubble up
            for error in e.errors():
                if error["type"] == "missing":
                    field_name = error["loc"][0] if error["loc"] else "unknown"
                    env_var_name = str(field_name).upper()
                    raise ConfigurationError(
                        variable_name=env_var_name,
                    ) from e
            raise


# At application import time, populate os.environ from .env (if present), then enforce presence.
load_dotenv()
config = Config()
