"""Example request/response synthesis for endpoint sections."""

from __future__ import annotations

import datetime
import json
import re
from typing import Any

from restdoc.errors import ExampleJsonError, MissingExampleArgumentError
from restdoc.models.config import RenderConfig
from restdoc.models.ir import ResourceMethod
from restdoc.render.markup import bold_text
from restdoc.render.sink import Sink

JSON_MEDIA_TYPE = "application/json"

PATH_VARIABLE = re.compile(r"\{([^}]*)\}")


def make_example_path(method: ResourceMethod) -> str:
    """
    Substitute every ``{name}`` placeholder in the method's path with its example value.

    Values are inserted literally and never rescanned, so a value containing
    braces or backslashes comes through unchanged.

    Raises:
        MissingExampleArgumentError: A placeholder has no example value.
    """
    path = method.path or ""
    bindings = method.example_args or {}

    def _substitute(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in bindings:
            raise MissingExampleArgumentError(name, bindings.keys(), method.http_method, path)
        return bindings[name]

    return PATH_VARIABLE.sub(_substitute, path)


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def canonical_json(data: Any) -> str:
    """Pretty-print with sorted keys and two-space indentation; dates become ISO strings."""
    return json.dumps(data, sort_keys=True, indent=2, ensure_ascii=False, default=_json_default)


def normalize_json(text: str) -> str:
    """
    Parse JSON text and re-serialize it canonically.

    Canonicalizing already canonical text returns it unchanged.

    Raises:
        ExampleJsonError: ``text`` is not valid JSON.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ExampleJsonError(text, str(exc)) from exc
    return canonical_json(data)


def example_url(method: ResourceMethod, config: RenderConfig) -> str:
    scheme = "https" if config.examples_are_ssl else "http"
    return f"{scheme}://{config.example_host_port}{config.endpoint_prefix}{make_example_path(method)}"


def example_request(method: ResourceMethod, config: RenderConfig) -> str:
    """
    Build a ``curl`` command line for the endpoint.

    GET and POST are curl's defaults, so only other verbs get ``-X``. A JSON
    request body is canonicalized; any other body is embedded verbatim.
    """
    lines = ["curl \\"]
    if method.http_method and method.http_method not in ("GET", "POST"):
        lines.append(f"    -X{method.http_method} \\")
    if config.examples_are_ssl:
        lines.append("    -E certinfo --cacert cacerts_file \\")
    if method.consumes_content_type is not None:
        lines.append(f'    -H "Content-Type: {method.consumes_content_type}" \\')
    if method.http_method != "GET" and method.example_request is not None:
        if method.consumes_content_type == JSON_MEDIA_TYPE:
            body = normalize_json(method.example_request)
        else:
            body = method.example_request
        lines.append(f"    -d'{body}' \\")
    lines.append(f"    {example_url(method, config)}")
    return "\n".join(lines)


def example_response(method: ResourceMethod) -> str | None:
    if method.example_response is None:
        return None
    if method.return_content_type == JSON_MEDIA_TYPE:
        return normalize_json(method.example_response)
    return method.example_response


def _preformatted(sink: Sink, text: str) -> None:
    sink.raw_text("<pre>")
    sink.text(text)
    sink.raw_text("</pre>")


def document_examples(sink: Sink, method: ResourceMethod, config: RenderConfig) -> None:
    """
    Emit the example request block and, when present, the example response block.

    Raises:
        MissingExampleArgumentError: A path placeholder has no example value.
        ExampleJsonError: A JSON example cannot be parsed.
    """
    request = example_request(method, config)
    response = example_response(method)

    sink.paragraph()
    bold_text(sink, "Example Request:")
    _preformatted(sink, request)
    sink.end_paragraph()

    if response is not None:
        sink.paragraph()
        bold_text(sink, "Example Response:")
        _preformatted(sink, response)
        sink.end_paragraph()
