"""Shared fixtures for restdoc tests."""

from __future__ import annotations

from typing import Any

import pytest
import structlog

import sample_api
from restdoc.extract.extractor import ExtractionResult, Extractor
from restdoc.extract.introspect import DeclarationScanner
from restdoc.models.config import RenderConfig
from restdoc.render.resolution import StaticResolver
from restdoc.render.sink import Sink


class RecordingSink(Sink):
    """Sink that records every call as ``(operation, *args)``."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []
        self.closed = False

    def _record(self, op: str, *args: Any) -> None:
        self.calls.append((op, *args))

    def section(self, level: int) -> None:
        self._record("section", level)

    def end_section(self, level: int) -> None:
        self._record("end_section", level)

    def section_title(self, level: int) -> None:
        self._record("section_title", level)

    def end_section_title(self, level: int) -> None:
        self._record("end_section_title", level)

    def anchor(self, name: str) -> None:
        self._record("anchor", name)

    def end_anchor(self) -> None:
        self._record("end_anchor")

    def link(self, target: str) -> None:
        self._record("link", target)

    def end_link(self) -> None:
        self._record("end_link")

    def text(self, text: str) -> None:
        self._record("text", text)

    def raw_text(self, text: str) -> None:
        self._record("raw_text", text)

    def paragraph(self) -> None:
        self._record("paragraph")

    def end_paragraph(self) -> None:
        self._record("end_paragraph")

    def bullet_list(self) -> None:
        self._record("bullet_list")

    def end_bullet_list(self) -> None:
        self._record("end_bullet_list")

    def list_item(self) -> None:
        self._record("list_item")

    def end_list_item(self) -> None:
        self._record("end_list_item")

    def definition_list(self) -> None:
        self._record("definition_list")

    def end_definition_list(self) -> None:
        self._record("end_definition_list")

    def defined_term(self) -> None:
        self._record("defined_term")

    def end_defined_term(self) -> None:
        self._record("end_defined_term")

    def definition(self) -> None:
        self._record("definition")

    def end_definition(self) -> None:
        self._record("end_definition")

    def bold(self) -> None:
        self._record("bold")

    def end_bold(self) -> None:
        self._record("end_bold")

    def monospaced(self) -> None:
        self._record("monospaced")

    def end_monospaced(self) -> None:
        self._record("end_monospaced")

    def line_break(self) -> None:
        self._record("line_break")

    def non_breaking_space(self) -> None:
        self._record("non_breaking_space")

    def flush(self) -> None:
        self._record("flush")

    def close(self) -> None:
        self._record("close")
        self.closed = True

    def texts(self) -> list[str]:
        """Every plain and raw text fragment, in order."""
        return [c[1] for c in self.calls if c[0] in ("text", "raw_text")]

    def joined(self) -> str:
        return "".join(self.texts())

    def ops(self, name: str) -> list[tuple[Any, ...]]:
        return [c for c in self.calls if c[0] == name]


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Undo any structlog configuration a test (or the CLI) applied."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def sample_result() -> ExtractionResult:
    """Extraction result for the sample widget service."""
    extractor = Extractor()
    extractor.process(DeclarationScanner().scan([sample_api]))
    return extractor.finish()


@pytest.fixture
def render_config() -> RenderConfig:
    return RenderConfig(examples_are_ssl=False, example_host_port="api.example.com")


@pytest.fixture
def resolver() -> StaticResolver:
    """Resolver that knows the sample module and its classes."""
    return StaticResolver([sample_api, sample_api.Status, sample_api.Color])
