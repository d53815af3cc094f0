"""Tests for configuration models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from restdoc.models.config import ExtractConfig, RenderConfig, RestDocConfig


class TestRenderConfig:
    def test_defaults(self) -> None:
        cfg = RenderConfig()
        assert cfg.examples_are_ssl is True
        assert cfg.example_host_port == "localhost:8080"
        assert cfg.endpoint_prefix == ""
        assert cfg.output_path == "rest.html"

    @pytest.mark.parametrize(
        ("raw", "normalized"),
        [("", ""), ("/", ""), ("v1", "/v1"), ("/v1/", "/v1"), (" /api ", "/api")],
    )
    def test_prefix_normalized(self, raw, normalized) -> None:
        assert RenderConfig(endpoint_prefix=raw).endpoint_prefix == normalized

    def test_blank_host_port_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RenderConfig(example_host_port="  ")

    def test_field_descriptions(self) -> None:
        info = RenderConfig.model_fields["resolution_paths"]
        assert info.description is not None
        assert "enum" in info.description


class TestRestDocConfig:
    def test_default(self) -> None:
        cfg = RestDocConfig.default()
        assert isinstance(cfg.extract, ExtractConfig)
        assert cfg.extract.output_dir == "."

    def test_from_toml_restdoc_table(self, tmp_path) -> None:
        path = tmp_path / "restdoc.toml"
        path.write_text(
            "[restdoc.extract]\n"
            'modules = ["shop.api"]\n'
            "\n"
            "[restdoc.render]\n"
            'endpoint_prefix = "v2/"\n'
            "examples_are_ssl = false\n"
        )
        cfg = RestDocConfig.from_toml(path)
        assert cfg.extract.modules == ["shop.api"]
        assert cfg.render.endpoint_prefix == "/v2"
        assert cfg.render.examples_are_ssl is False

    def test_from_pyproject_tool_table(self, tmp_path) -> None:
        path = tmp_path / "pyproject.toml"
        path.write_text('[project]\nname = "shop"\n\n[tool.restdoc.render]\ntitle = "Shop API"\n')
        assert RestDocConfig.from_toml(path).render.title == "Shop API"

    def test_from_toml_without_table(self, tmp_path) -> None:
        path = tmp_path / "empty.toml"
        path.write_text('[other]\nx = 1\n')
        assert RestDocConfig.from_toml(path) == RestDocConfig.default()

    def test_from_toml_invalid_values(self, tmp_path) -> None:
        path = tmp_path / "bad.toml"
        path.write_text('[restdoc.render]\nexample_host_port = ""\n')
        with pytest.raises(ValidationError):
            RestDocConfig.from_toml(path)
