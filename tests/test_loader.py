"""Tests for loading and merging IR documents."""

from __future__ import annotations

import pytest
from structlog.testing import capture_logs

from restdoc.errors import DocumentIOError
from restdoc.render.loader import load_resource_methods, load_transfer_classes


def _write(tmp_path, name: str, text: str):
    path = tmp_path / name
    path.write_text(text)
    return path


class TestLoadTransferClasses:
    def test_union_of_documents(self, tmp_path) -> None:
        a = _write(tmp_path, "a.json", '{"x.A": {"javadoc": "A"}}')
        b = _write(tmp_path, "b.json", '{"x.B": {"javadoc": "B"}}')
        merged = load_transfer_classes([a, b])
        assert sorted(merged) == ["x.A", "x.B"]

    def test_first_loaded_wins(self, tmp_path) -> None:
        a = _write(tmp_path, "a.json", '{"x.A": {"javadoc": "first"}}')
        b = _write(tmp_path, "b.json", '{"x.A": {"javadoc": "second"}}')
        with capture_logs() as logs:
            merged = load_transfer_classes([a, b])
        assert merged["x.A"].javadoc == "first"
        conflicts = [e for e in logs if e["event"] == "transfer_class_conflict"]
        assert len(conflicts) == 1
        assert conflicts[0]["name"] == "x.A"
        assert conflicts[0]["log_level"] == "warning"

    def test_identical_duplicate_is_quiet(self, tmp_path) -> None:
        a = _write(tmp_path, "a.json", '{"x.A": {"javadoc": "same"}}')
        b = _write(tmp_path, "b.json", '{"x.A": {"javadoc": "same"}}')
        with capture_logs() as logs:
            load_transfer_classes([a, b])
        assert not [e for e in logs if e["event"] == "transfer_class_conflict"]

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(DocumentIOError) as exc_info:
            load_transfer_classes([tmp_path / "nope.json"])
        assert exc_info.value.path.endswith("nope.json")

    def test_malformed_json(self, tmp_path) -> None:
        bad = _write(tmp_path, "bad.json", "{")
        with pytest.raises(DocumentIOError):
            load_transfer_classes([bad])

    def test_no_documents(self) -> None:
        assert load_transfer_classes([]) == {}


class TestLoadResourceMethods:
    def test_concatenated_in_order(self, tmp_path) -> None:
        a = _write(tmp_path, "a.json", '[{"path": "/b", "returnType": {"name": "str"}}]')
        b = _write(tmp_path, "b.json", '[{"path": "/a", "returnType": {"name": "str"}}]')
        assert [m.path for m in load_resource_methods([a, b])] == ["/b", "/a"]

    def test_schema_violation(self, tmp_path) -> None:
        bad = _write(tmp_path, "bad.json", '{"not": "a list"}')
        with pytest.raises(DocumentIOError) as exc_info:
            load_resource_methods([bad])
        assert "invalid document" in str(exc_info.value)
