"""Loading and merging IR documents for rendering."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from pathlib import Path
from typing import TypeVar

import structlog
from pydantic import ValidationError

from restdoc.errors import DocumentIOError
from restdoc.models.ir import (
    ResourceMethod,
    TransferClassMap,
    parse_resource_methods,
    parse_transfer_classes,
)

logger = structlog.get_logger("restdoc.loader")

_T = TypeVar("_T")


def _read_document(path: str | Path, parse: Callable[[str], _T]) -> _T:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise DocumentIOError(str(path), str(exc)) from exc
    try:
        return parse(text)
    except ValidationError as exc:
        raise DocumentIOError(str(path), f"invalid document: {exc}") from exc


def load_transfer_classes(paths: Iterable[str | Path]) -> TransferClassMap:
    """
    Load and merge transfer class documents.

    Documents are merged in the order given. When two documents describe the
    same type the first one wins; a differing duplicate is logged.

    Raises:
        DocumentIOError: A document cannot be read or parsed.
    """
    merged: TransferClassMap = {}
    for path in paths:
        document = _read_document(path, parse_transfer_classes)
        logger.debug("transfer_classes_loaded", path=str(path), count=len(document))
        for name, klass in document.items():
            existing = merged.get(name)
            if existing is None:
                merged[name] = klass
            elif existing != klass:
                logger.warning("transfer_class_conflict", name=name, path=str(path))
    return merged


def load_resource_methods(paths: Iterable[str | Path]) -> list[ResourceMethod]:
    """
    Load and concatenate endpoint documents in the order given.

    Raises:
        DocumentIOError: A document cannot be read or parsed.
    """
    methods: list[ResourceMethod] = []
    for path in paths:
        document = _read_document(path, parse_resource_methods)
        logger.debug("resource_methods_loaded", path=str(path), count=len(document))
        methods.extend(document)
    return methods
