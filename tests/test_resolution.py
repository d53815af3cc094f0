"""Tests for the type resolution fallback."""

from __future__ import annotations

import sample_api
from restdoc.render.resolution import (
    ImportResolver,
    NullResolver,
    PythonType,
    StaticResolver,
    document_unresolved_type,
    resolve_nameish,
)


class Outer:
    class Inner:
        class Deeper:
            pass


class ExplodingResolver:
    def resolve(self, name):
        raise RuntimeError("boom")


class TestPythonType:
    def test_class_full_name(self) -> None:
        assert PythonType(sample_api.Status).full_name == "sample_api.Status"

    def test_enum_constants_in_order(self) -> None:
        resolved = PythonType(sample_api.Status)
        assert resolved.is_enum()
        assert resolved.enum_constants() == ["OK", "ERROR"]

    def test_not_enum(self) -> None:
        resolved = PythonType(sample_api.Widget)
        assert not resolved.is_enum()
        assert resolved.enum_constants() == []

    def test_module_nested_types_are_own_classes(self) -> None:
        names = {t.full_name for t in PythonType(sample_api).nested_types()}
        assert "sample_api.Status" in names
        assert "sample_api.Widget" in names
        assert not any(name.startswith("restdoc") for name in names)

    def test_class_nested_types(self) -> None:
        names = [t.full_name for t in PythonType(Outer).nested_types()]
        assert names == [f"{__name__}.Outer.Inner"]


class TestResolveNameish:
    def test_direct_hit(self) -> None:
        resolver = StaticResolver([sample_api.Status])
        assert resolve_nameish(resolver, "sample_api.Status").full_name == "sample_api.Status"

    def test_nested_through_module(self) -> None:
        resolver = StaticResolver([sample_api])
        found = resolve_nameish(resolver, "sample_api.Status")
        assert found is not None and found.is_enum()

    def test_nested_two_levels(self) -> None:
        import sys

        resolver = StaticResolver([sys.modules[__name__]])
        found = resolve_nameish(resolver, f"{__name__}.Outer.Inner.Deeper")
        assert found is not None
        assert found.full_name == f"{__name__}.Outer.Inner.Deeper"

    def test_not_found(self) -> None:
        assert resolve_nameish(StaticResolver([sample_api]), "sample_api.Nope") is None
        assert resolve_nameish(NullResolver(), "a.b.C") is None

    def test_resolver_errors_become_not_found(self) -> None:
        assert resolve_nameish(ExplodingResolver(), "a.b.C") is None

    def test_import_resolver(self) -> None:
        found = resolve_nameish(ImportResolver(), "sample_api.Status")
        assert found is not None
        assert found.enum_constants() == ["OK", "ERROR"]

    def test_import_resolver_missing(self) -> None:
        assert ImportResolver().resolve("restdoc_no_such_module") is None

    def test_import_resolver_search_path(self, tmp_path) -> None:
        (tmp_path / "resolver_probe_mod.py").write_text(
            "import enum\n\nclass Mode(enum.Enum):\n    FAST = 1\n    SLOW = 2\n"
        )
        found = resolve_nameish(ImportResolver([str(tmp_path)]), "resolver_probe_mod.Mode")
        assert found is not None
        assert found.enum_constants() == ["FAST", "SLOW"]


class TestDocumentUnresolvedType:
    def test_enum_listing(self, sink, resolver) -> None:
        document_unresolved_type(sink, resolver, "sample_api.Status")
        assert ("anchor", "sample_api-Status") in sink.calls
        assert "Type: sample_api.Status" in sink.texts()
        assert "Enumerated Type.  Valid values are: " in sink.texts()
        assert '"OK", "ERROR"' in sink.texts()

    def test_not_enum_notice(self, sink, resolver) -> None:
        document_unresolved_type(sink, resolver, "sample_api.Widget")
        assert any("Not an enumerated type" in t and "sample_api.Widget" in t for t in sink.texts())

    def test_not_found_notice(self, sink) -> None:
        document_unresolved_type(sink, NullResolver(), "shop.Gone")
        assert "Was not able to find class: shop.Gone" in sink.texts()
        assert sink.ops("line_break")

    def test_never_raises(self, sink) -> None:
        document_unresolved_type(sink, ExplodingResolver(), "shop.Gone")
        assert "Was not able to find class: shop.Gone" in sink.texts()
