"""Configuration models for the extractor and renderer."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator


class ExtractConfig(BaseModel):
    """Configuration for an extraction run."""

    modules: list[str] = Field(
        default_factory=list,
        description="Dotted names of the modules to scan for annotated declarations.",
    )

    search_paths: list[str] = Field(
        default_factory=list,
        description="Extra import roots prepended to sys.path while the modules are imported.",
    )

    output_dir: str = Field(
        default=".",
        description="Directory the IR documents are written to.",
    )


class RenderConfig(BaseModel):
    """Configuration for a render run."""

    json_classes_files: list[str] = Field(
        default_factory=list,
        description="Transfer class IR documents to load, in merge order.",
    )

    rest_endpoints_files: list[str] = Field(
        default_factory=list,
        description="Endpoint IR documents to load, in merge order.",
    )

    resolution_paths: list[str] = Field(
        default_factory=list,
        description=(
            "Import roots searched when a referenced type has no transfer class entry. "
            "Used only for enum introspection."
        ),
    )

    endpoint_prefix: str = Field(
        default="",
        description="Path prefix prepended to every rendered endpoint path and anchor.",
    )

    examples_are_ssl: bool = True
    """Render example URLs with ``https`` and a client certificate flag."""

    example_host_port: str = Field(
        default="localhost:8080",
        description="host:port used in example request URLs.",
    )

    output_path: str = Field(
        default="rest.html",
        description="Where the rendered document is written.",
    )

    title: str = "REST Endpoints And Transfer Classes"

    @field_validator("endpoint_prefix")
    @classmethod
    def _normalize_prefix(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if value and not value.startswith("/"):
            value = "/" + value
        return value

    @field_validator("example_host_port")
    @classmethod
    def _host_port_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("example_host_port must not be blank")
        return value.strip()


class RestDocConfig(BaseModel):
    """
    Top-level configuration.

    Example::

        config = RestDocConfig(
            extract=ExtractConfig(modules=["shop.api"], output_dir="build/ir"),
            render=RenderConfig(endpoint_prefix="/v1", examples_are_ssl=False),
        )
    """

    extract: ExtractConfig = Field(default_factory=ExtractConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)

    @classmethod
    def default(cls) -> RestDocConfig:
        """Return a config instance with all defaults."""
        return cls()

    @classmethod
    def from_toml(cls, path: str | Path) -> RestDocConfig:
        """
        Load configuration from a TOML file.

        Reads a ``[restdoc]`` table, or ``[tool.restdoc]`` when the file is a
        ``pyproject.toml``. A file with neither table yields the defaults.

        Raises:
            OSError: The file cannot be read.
            tomllib.TOMLDecodeError: The file is not valid TOML.
            pydantic.ValidationError: The table does not match the schema.
        """
        with open(path, "rb") as fh:
            data: dict[str, Any] = tomllib.load(fh)
        table = data.get("restdoc")
        if table is None:
            table = data.get("tool", {}).get("restdoc", {})
        return cls.model_validate(table)
