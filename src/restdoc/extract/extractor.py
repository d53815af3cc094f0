"""Turn annotated declarations into the two IR documents."""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path

import structlog
from pydantic import BaseModel, Field

from restdoc.errors import DocumentIOError, ExampleArgsError
from restdoc.extract import markers
from restdoc.extract.declarations import Annotation, Declaration, DeclarationKind
from restdoc.extract.introspect import DeclarationScanner
from restdoc.models.config import ExtractConfig
from restdoc.models.ir import (
    ArgumentLocation,
    ResourceArgument,
    ResourceClass,
    ResourceMethod,
    TransferClass,
    TransferClassMap,
    dump_resource_methods,
    dump_transfer_classes,
)
from restdoc.models.types import ANY_TYPE, TypeDescriptor

JSON_CLASSES_FILE = "json_classes.json"
REST_ENDPOINTS_FILE = "rest_endpoints.json"
DEBUG_MESSAGES_FILE = "debug_messages.json"

_HTTP_VERBS = ("GET", "PUT", "POST", "PATCH", "DELETE")

logger = structlog.get_logger("restdoc.extractor")


def parse_example_args(spec: str | None, method: str | None = None) -> dict[str, str] | None:
    """
    Parse ``"id=7|name=foo"`` into ``{"id": "7", "name": "foo"}``.

    Items are split on the first ``=`` only, so values may contain ``=``.

    Raises:
        ExampleArgsError: An item has no ``=``.
    """
    if spec is None:
        return None
    result: dict[str, str] = {}
    for item in spec.split("|"):
        key, sep, value = item.partition("=")
        if not sep:
            raise ExampleArgsError(spec, item, method)
        result[key] = value
    return result


def compute_display_path(base_path: str | None, method_path: str | None) -> str:
    """
    Join a resource base path and a method path with exactly one slash between them.

    ``("/a/", "/b")``, ``("/a", "b")``, ``("/a", "/b")`` and ``("/a/", "b")``
    all give ``"/a/b"``. The base path always gains a leading slash; a missing
    method path returns the base path alone.
    """
    root = base_path or ""
    if not root.startswith("/"):
        root = "/" + root
    if method_path is None:
        return root
    if root.endswith("/") != method_path.startswith("/"):
        return root + method_path
    if root.endswith("/"):
        return root + method_path[1:]
    return root + "/" + method_path


def compute_http_method(decl: Declaration) -> str | None:
    """Return the verb of the first annotation whose name ends in ``.GET``, ``.PUT``, ..."""
    for ann in decl.annotations:
        for verb in _HTTP_VERBS:
            if ann.name.endswith("." + verb):
                return verb
    return None


def _joined(ann: Annotation | None) -> str | None:
    if ann is None or ann.value is None:
        return None
    if isinstance(ann.value, (tuple, list)):
        return ",".join(ann.value)
    return str(ann.value)


def _value(ann: Annotation | None) -> str | None:
    return None if ann is None else ann.value


class ExtractionResult(BaseModel):
    """Everything one extraction run produced."""

    transfer_classes: TransferClassMap = Field(default_factory=dict)
    endpoints: list[ResourceMethod] = Field(default_factory=list)
    debug_messages: list[str] = Field(default_factory=list)

    def json_classes_document(self) -> str:
        return dump_transfer_classes(self.transfer_classes)

    def rest_endpoints_document(self) -> str:
        return dump_resource_methods(self.endpoints)

    def write(self, output_dir: str | Path) -> dict[str, Path]:
        """
        Write the IR documents into ``output_dir``, creating it if needed.

        Returns:
            Mapping of document file name to the path written.

        Raises:
            DocumentIOError: The directory or a file cannot be written.
        """
        out = Path(output_dir)
        documents = {
            JSON_CLASSES_FILE: self.json_classes_document(),
            REST_ENDPOINTS_FILE: self.rest_endpoints_document(),
            DEBUG_MESSAGES_FILE: dump_debug_messages(self.debug_messages),
        }
        written: dict[str, Path] = {}
        try:
            out.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise DocumentIOError(str(out), str(exc)) from exc
        for name, text in documents.items():
            target = out / name
            try:
                target.write_text(text, encoding="utf-8")
            except OSError as exc:
                raise DocumentIOError(str(target), str(exc)) from exc
            written[name] = target
        return written


def dump_debug_messages(messages: list[str]) -> str:
    return json.dumps(messages, indent=2, ensure_ascii=False) + "\n"


class Extractor:
    """
    Accumulates transfer classes and resource classes across declaration passes.

    One extractor owns its accumulators for the whole run: call
    :meth:`process` once per batch of declarations, then :meth:`finish` once.

    Example::

        extractor = Extractor()
        extractor.process(DeclarationScanner().scan(["shop.api", "shop.models"]))
        result = extractor.finish()
        result.write("build/ir")
    """

    def __init__(self) -> None:
        self._transfer_classes: dict[str, TransferClass] = {}
        self._resource_classes: dict[str, ResourceClass] = {}
        self._debug_messages: list[str] = []
        self._logger = structlog.get_logger("restdoc.extractor")

    def process(self, declarations: Iterable[Declaration]) -> None:
        """
        Run every pass over the given declaration trees.

        Raises:
            ExampleArgsError: An endpoint carries a malformed example-args spec.
        """
        elements = [d for root in declarations for d in root.walk()]
        self._process_json_properties(elements)
        self._process_json_serialize(elements)
        self._process_doc_enums(elements)
        self._process_rest_methods(elements)

    def finish(self) -> ExtractionResult:
        """Flatten resource classes into endpoints with their full paths."""
        endpoints: list[ResourceMethod] = []
        for class_name in sorted(self._resource_classes):
            klass = self._resource_classes[class_name]
            for method in klass.members:
                endpoints.append(
                    method.model_copy(
                        update={"path": compute_display_path(klass.base_path, method.path)}
                    )
                )
        self._logger.info(
            "extraction_finished",
            transfer_classes=len(self._transfer_classes),
            endpoints=len(endpoints),
            debug_messages=len(self._debug_messages),
        )
        return ExtractionResult(
            transfer_classes=dict(sorted(self._transfer_classes.items())),
            endpoints=endpoints,
            debug_messages=list(self._debug_messages),
        )

    # ── Transfer classes ──────────────────────────────────────────────────────

    def _process_json_properties(self, elements: list[Declaration]) -> None:
        for decl in elements:
            ann = decl.annotation(markers.JSON_PROPERTY)
            if ann is None:
                continue
            owner = decl.enclosing
            if owner is not None and owner.kind in (
                DeclarationKind.CONSTRUCTOR,
                DeclarationKind.METHOD,
            ):
                owner = owner.enclosing
            if owner is None or owner.kind not in (DeclarationKind.CLASS, DeclarationKind.ENUM):
                self._debug(f"property {decl.qualified_name} has no enclosing type")
                continue
            klass = self._get_or_create_transfer_class(owner.qualified_name, owner.doc)
            klass.add_member(ann.value or decl.name, decl.type or TypeDescriptor.of(ANY_TYPE))

    def _process_json_serialize(self, elements: list[Declaration]) -> None:
        for decl in elements:
            if not decl.has_annotation(markers.JSON_SERIALIZE):
                continue
            if decl.kind is not DeclarationKind.CLASS:
                self._debug(f"kind for {decl.qualified_name} is not class, but {decl.kind}")
                continue
            if decl.qualified_name in self._transfer_classes:
                continue
            self._get_or_create_transfer_class(decl.qualified_name, decl.doc)

    def _process_doc_enums(self, elements: list[Declaration]) -> None:
        for decl in elements:
            if not decl.has_annotation(markers.DOC_ENUM):
                continue
            if decl.kind is not DeclarationKind.ENUM:
                self._logger.warning(
                    "doc_enum_not_enum", name=decl.qualified_name, kind=str(decl.kind)
                )
                continue
            klass = self._get_or_create_transfer_class(decl.qualified_name, decl.doc)
            seen = {v.name for v in klass.values or ()}
            for inner in decl.enclosed:
                if inner.kind is DeclarationKind.ENUM_CONSTANT and inner.name not in seen:
                    klass.add_value(inner.name, inner.doc)
                    seen.add(inner.name)

    def _get_or_create_transfer_class(self, name: str, javadoc: str | None) -> TransferClass:
        klass = self._transfer_classes.get(name)
        if klass is not None:
            return klass
        klass = TransferClass(members=[], values=[], javadoc=javadoc)
        self._transfer_classes[name] = klass
        return klass

    # ── Endpoints ─────────────────────────────────────────────────────────────

    def _process_rest_methods(self, elements: list[Declaration]) -> None:
        for decl in elements:
            if not any(decl.has_annotation(m) for m in markers.HTTP_METHOD_MARKERS):
                continue
            if decl.kind is not DeclarationKind.METHOD:
                self._debug(f"{decl.qualified_name} carries an HTTP method but is a {decl.kind}")
                continue
            method = self._compute_method(decl, self._compute_arguments(decl))
            self._parent_resource_class(decl).members.append(method)

    @staticmethod
    def _compute_arguments(decl: Declaration) -> list[ResourceArgument]:
        arguments: list[ResourceArgument] = []
        for param in decl.parameters:
            path_ann = param.annotation(markers.PATH_PARAM)
            if path_ann is not None:
                location = ArgumentLocation.PATH
            elif param.has_annotation(markers.QUERY_PARAM):
                location = ArgumentLocation.QUERY
            elif param.has_annotation(markers.CONTEXT):
                location = ArgumentLocation.CONTEXT
            else:
                location = ArgumentLocation.BODY
            arguments.append(
                ResourceArgument(
                    name=path_ann.value if path_ann is not None else param.name,
                    type=param.type or TypeDescriptor.of(ANY_TYPE),
                    doc=_value(param.annotation(markers.ARGUMENT_DOC)),
                    location=location,
                )
            )
        return arguments

    @staticmethod
    def _compute_method(decl: Declaration, arguments: list[ResourceArgument]) -> ResourceMethod:
        return ResourceMethod(
            name=decl.name,
            http_method=compute_http_method(decl),
            path=_value(decl.annotation(markers.PATH)),
            return_content_type=_joined(decl.annotation(markers.PRODUCES)),
            consumes_content_type=_joined(decl.annotation(markers.CONSUMES)),
            return_type=decl.type or TypeDescriptor.of(ANY_TYPE),
            arguments=arguments,
            javadoc=decl.doc,
            example_response=_value(decl.annotation(markers.EXAMPLE_RESPONSE)),
            example_request=_value(decl.annotation(markers.EXAMPLE_REQUEST)),
            example_args=parse_example_args(
                _value(decl.annotation(markers.EXAMPLE_ARGS)), decl.qualified_name
            ),
        )

    def _parent_resource_class(self, decl: Declaration) -> ResourceClass:
        parent = decl.enclosing
        key = parent.qualified_name if parent is not None else ""
        klass = self._resource_classes.get(key)
        if klass is not None:
            return klass
        base = _value(parent.annotation(markers.PATH)) if parent is not None else None
        klass = ResourceClass(base_path=base)
        self._resource_classes[key] = klass
        return klass

    def _debug(self, message: str) -> None:
        self._logger.debug("extraction_skipped", reason=message)
        self._debug_messages.append(message)


def run_extraction(config: ExtractConfig, *, write: bool = True) -> ExtractionResult:
    """
    Scan ``config.modules``, extract the IR and (by default) write it to ``config.output_dir``.

    Raises:
        ImportError: A module cannot be imported.
        ExampleArgsError: An endpoint carries a malformed example-args spec.
        DocumentIOError: The IR documents cannot be written.
    """
    scanner = DeclarationScanner(config.search_paths)
    extractor = Extractor()
    extractor.process(scanner.scan(config.modules))
    result = extractor.finish()
    if write:
        written = result.write(config.output_dir)
        logger.info("ir_written", files=[str(p) for p in written.values()])
    return result
