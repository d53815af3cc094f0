"""Tests for the document renderer."""

from __future__ import annotations

import io

import pytest

from restdoc.errors import DocumentIOError, MissingExampleArgumentError
from restdoc.extract import markers
from restdoc.extract.declarations import Annotation, Declaration, DeclarationKind
from restdoc.extract.extractor import JSON_CLASSES_FILE, REST_ENDPOINTS_FILE, Extractor
from restdoc.models.config import RenderConfig
from restdoc.models.ir import ResourceMethod, TransferClass
from restdoc.models.types import TypeDescriptor
from restdoc.render.renderer import DocumentRenderer, documented_types, run_render, sort_endpoints
from restdoc.render.resolution import NullResolver
from restdoc.render.sink import HtmlSink

T = TypeDescriptor.of


def _method(http_method: str, path: str, name: str = "") -> ResourceMethod:
    return ResourceMethod(name=name, http_method=http_method, path=path, return_type=T("str"))


@pytest.fixture
def rendered(sink, sample_result, render_config, resolver):
    DocumentRenderer(render_config, resolver).render(
        sink, sample_result.transfer_classes, sample_result.endpoints
    )
    return sink


class TestSortEndpoints:
    def test_by_path_then_method(self) -> None:
        methods = [_method("GET", "/b"), _method("POST", "/a"), _method("DELETE", "/a")]
        assert [(m.path, m.http_method) for m in sort_endpoints(methods)] == [
            ("/a", "DELETE"),
            ("/a", "POST"),
            ("/b", "GET"),
        ]

    def test_stable_for_equal_keys(self) -> None:
        methods = [_method("GET", "/a", "first"), _method("GET", "/a", "second")]
        assert [m.name for m in sort_endpoints(methods)] == ["first", "second"]


class TestDocumentedTypes:
    def test_sample_types(self, sample_result) -> None:
        assert documented_types(sample_result.transfer_classes) == [
            "sample_api.Color",
            "sample_api.Dimensions",
            "sample_api.Gadget",
            "sample_api.Status",
            "sample_api.Widget",
        ]

    def test_reachable_through_generics(self) -> None:
        klass = TransferClass()
        klass.add_member("m", T("dict", T("str"), T("list", T("typing.Optional", T("a.Deep")))))
        assert documented_types({"a.Top": klass}) == ["a.Deep", "a.Top"]

    def test_skip_set_removed(self) -> None:
        klass = TransferClass()
        klass.add_member("n", T("int"))
        klass.add_member("d", T("datetime.datetime"))
        assert documented_types({"a.Top": klass}) == ["a.Top"]


class TestRenderSample:
    def test_sink_closed_last(self, rendered) -> None:
        assert rendered.closed
        assert rendered.calls[-2:] == [("flush",), ("close",)]

    def test_top_level_headings(self, rendered) -> None:
        texts = rendered.texts()
        assert texts.index("REST Endpoints") < texts.index("Transfer Classes")
        assert texts.count("Table Of Contents") == 2

    def test_endpoint_table_of_contents_order(self, rendered) -> None:
        links = [c[1] for c in rendered.ops("link")]
        assert links[:5] == [
            "#GET--health",
            "#GET--widgets",
            "#POST--widgets",
            "#DELETE--widgets--id-",
            "#GET--widgets--id-",
        ]

    def test_endpoint_heading_anchor(self, rendered) -> None:
        assert ("anchor", "GET--widgets--id-") in rendered.calls
        assert "GET /widgets/{id}" in rendered.texts()

    def test_argument_rendering(self, rendered) -> None:
        joined = rendered.joined()
        assert "id type string (path)" in joined
        assert "color type sample_api.Color (query)" in joined
        assert "request type object (context)" in joined
        assert "Widget id." in rendered.texts()

    def test_returns_block(self, rendered) -> None:
        texts = rendered.texts()
        assert "Object-Type:" in texts
        assert "text/plain,application/json" in texts

    def test_request_content_type(self, rendered) -> None:
        texts = rendered.texts()
        assert "Request Content-Type: " in texts
        assert "application/json" in texts

    def test_example_url_substituted(self, rendered) -> None:
        assert any("http://api.example.com/widgets/7" in t for t in rendered.texts())

    def test_types_in_sorted_order(self, rendered) -> None:
        headings = [t for t in rendered.texts() if t.startswith("Type: ")]
        assert headings == [
            "Type: sample_api.Color",
            "Type: sample_api.Dimensions",
            "Type: sample_api.Gadget",
            "Type: sample_api.Status",
            "Type: sample_api.Widget",
        ]

    def test_members_block(self, rendered) -> None:
        texts = rendered.texts()
        assert '"labels" : ' in texts
        assert '"status" : ' in texts
        assert ("link", "#sample_api-Status") in rendered.calls

    def test_enum_values(self, rendered) -> None:
        texts = rendered.texts()
        assert '"RED"' in texts
        assert '"BLUE"' in texts
        assert "Warm." in texts

    def test_fallback_enum(self, rendered) -> None:
        texts = rendered.texts()
        assert "Enumerated Type.  Valid values are: " in texts
        assert '"OK", "ERROR"' in texts

    def test_javadoc_links(self, rendered) -> None:
        assert any("<code>sample_api.Gadget</code>" in t for t in rendered.texts())


class TestRenderOptions:
    def test_endpoint_prefix(self, sink, sample_result, resolver) -> None:
        config = RenderConfig(endpoint_prefix="v1/", examples_are_ssl=False)
        DocumentRenderer(config, resolver).render(
            sink, sample_result.transfer_classes, sample_result.endpoints
        )
        assert ("anchor", "GET--v1-widgets--id-") in sink.calls
        assert "GET /v1/widgets/{id}" in sink.texts()
        assert any("http://localhost:8080/v1/widgets/7" in t for t in sink.texts())

    def test_unresolved_type_notice(self, sink) -> None:
        klass = TransferClass()
        klass.add_member("x", T("shop.Gone"))
        DocumentRenderer(RenderConfig(), NullResolver()).render(sink, {"shop.Top": klass}, [])
        assert "Was not able to find class: shop.Gone" in sink.texts()

    def test_missing_example_argument_aborts(self, sink) -> None:
        method = _method("GET", "/w/{id}").model_copy(update={"example_args": {"other": "1"}})
        with pytest.raises(MissingExampleArgumentError):
            DocumentRenderer(RenderConfig(), NullResolver()).render(sink, {}, [method])
        assert not sink.closed

    def test_empty_example_arg_survives_written_documents(self, sink, tmp_path) -> None:
        resource = Declaration(
            name="Things",
            qualified_name="api.Things",
            kind=DeclarationKind.CLASS,
            annotations=[Annotation(markers.PATH, "/things")],
        )
        method = resource.add_enclosed(
            Declaration(
                name="find",
                kind=DeclarationKind.METHOD,
                type=T("str"),
                annotations=[
                    Annotation(markers.GET),
                    Annotation(markers.PATH, "{q}"),
                    Annotation(markers.EXAMPLE_ARGS, "q="),
                ],
            )
        )
        method.add_parameter(
            Declaration(
                name="q",
                kind=DeclarationKind.PARAMETER,
                type=T("str"),
                annotations=[Annotation(markers.PATH_PARAM, "q")],
            )
        )
        extractor = Extractor()
        extractor.process([resource])
        written = extractor.finish().write(tmp_path)
        config = RenderConfig(rest_endpoints_files=[str(written[REST_ENDPOINTS_FILE])])
        DocumentRenderer(config, NullResolver()).render(sink)
        assert "GET /things/{q}" in sink.texts()
        assert any("localhost:8080/things/" in t for t in sink.texts())
        assert sink.closed

    def test_loads_configured_documents(self, sink, sample_result, tmp_path, resolver) -> None:
        written = sample_result.write(tmp_path)
        config = RenderConfig(
            json_classes_files=[str(written[JSON_CLASSES_FILE])],
            rest_endpoints_files=[str(written[REST_ENDPOINTS_FILE])],
        )
        DocumentRenderer(config, resolver).render(sink)
        assert "Type: sample_api.Widget" in sink.texts()
        assert "GET /health" in sink.texts()


class TestHtmlOutput:
    def test_full_page(self, sample_result, render_config, resolver) -> None:
        out = io.StringIO()
        DocumentRenderer(render_config, resolver).render(
            HtmlSink(out), sample_result.transfer_classes, sample_result.endpoints
        )
        page = out.getvalue()
        assert "<h1>REST Endpoints</h1>" in page
        assert '<a href="#sample_api-Widget">sample_api.Widget</a>' in page
        assert "&lt;code&gt;" not in page


class TestRunRender:
    def test_writes_output(self, sample_result, tmp_path, resolver) -> None:
        written = sample_result.write(tmp_path / "ir")
        config = RenderConfig(
            json_classes_files=[str(written[JSON_CLASSES_FILE])],
            rest_endpoints_files=[str(written[REST_ENDPOINTS_FILE])],
            output_path=str(tmp_path / "site" / "rest.html"),
            title="Widgets",
        )
        target = run_render(config, resolver)
        assert target == tmp_path / "site" / "rest.html"
        assert "<title>Widgets</title>" in target.read_text()

    def test_failed_render_writes_nothing(self, tmp_path) -> None:
        config = RenderConfig(
            json_classes_files=[str(tmp_path / "missing.json")],
            output_path=str(tmp_path / "rest.html"),
        )
        with pytest.raises(DocumentIOError):
            run_render(config, NullResolver())
        assert not (tmp_path / "rest.html").exists()
