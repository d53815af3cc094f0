"""Extraction: annotated declarations → IR documents."""

from restdoc.extract.declarations import Annotation, Declaration, DeclarationKind
from restdoc.extract.extractor import (
    DEBUG_MESSAGES_FILE,
    JSON_CLASSES_FILE,
    REST_ENDPOINTS_FILE,
    ExtractionResult,
    Extractor,
    compute_display_path,
    compute_http_method,
    parse_example_args,
    run_extraction,
)
from restdoc.extract.introspect import DeclarationScanner, describe_type, type_name

__all__ = [
    "Annotation",
    "Declaration",
    "DeclarationKind",
    "DeclarationScanner",
    "describe_type",
    "type_name",
    "Extractor",
    "ExtractionResult",
    "run_extraction",
    "parse_example_args",
    "compute_display_path",
    "compute_http_method",
    "JSON_CLASSES_FILE",
    "REST_ENDPOINTS_FILE",
    "DEBUG_MESSAGES_FILE",
]
