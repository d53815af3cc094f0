"""
restdoc: REST endpoint and transfer class documentation for Python services.

Annotate a service with the markers, extract the IR, then render it::

    from restdoc import markers
    from restdoc import ExtractConfig, RenderConfig, run_extraction, run_render

    run_extraction(ExtractConfig(modules=["shop.api"], output_dir="build/ir"))
    run_render(
        RenderConfig(
            json_classes_files=["build/ir/json_classes.json"],
            rest_endpoints_files=["build/ir/rest_endpoints.json"],
        )
    )
"""

from restdoc.errors import (
    DocumentIOError,
    ExampleArgsError,
    ExampleJsonError,
    MissingExampleArgumentError,
    RestDocError,
)
from restdoc.extract import markers
from restdoc.extract.extractor import ExtractionResult, Extractor, run_extraction
from restdoc.models import (
    ExtractConfig,
    RenderConfig,
    ResourceArgument,
    ResourceMethod,
    RestDocConfig,
    TransferClass,
    TypeDescriptor,
)
from restdoc.render.renderer import DocumentRenderer, run_render
from restdoc.render.sink import HtmlSink, Sink

__version__ = "0.1.0"

__all__ = [
    # Annotations
    "markers",
    # Config
    "ExtractConfig",
    "RenderConfig",
    "RestDocConfig",
    # IR
    "TypeDescriptor",
    "ResourceArgument",
    "ResourceMethod",
    "TransferClass",
    # Pipeline
    "Extractor",
    "ExtractionResult",
    "run_extraction",
    "DocumentRenderer",
    "run_render",
    "Sink",
    "HtmlSink",
    # Errors
    "RestDocError",
    "ExampleArgsError",
    "MissingExampleArgumentError",
    "ExampleJsonError",
    "DocumentIOError",
]
