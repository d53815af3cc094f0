"""Fatal errors. Any of these aborts the current extraction or render run."""

from __future__ import annotations

from collections.abc import Iterable


class RestDocError(Exception):
    """Base class for restdoc errors."""


class ExampleArgsError(RestDocError):
    """Raised when an example-args specification has an item without ``=``."""

    def __init__(self, spec: str, item: str, method: str | None = None) -> None:
        where = f" on {method}" if method else ""
        super().__init__(f"Item {item!r} in example args {spec!r}{where} is missing '='")
        self.spec = spec
        self.item = item
        self.method = method


class MissingExampleArgumentError(RestDocError):
    """Raised when a path placeholder has no value in the example arguments."""

    def __init__(
        self,
        arg_name: str,
        available: Iterable[str],
        http_method: str | None,
        path: str,
    ) -> None:
        self.arg_name = arg_name
        self.available = sorted(available)
        self.http_method = http_method
        self.path = path
        super().__init__(
            f"Cannot find argument {arg_name!r} in example arguments "
            f"[{', '.join(self.available)}] on {http_method} {path}"
        )


class ExampleJsonError(RestDocError):
    """Raised when example JSON text cannot be parsed."""

    def __init__(self, text: str, reason: str) -> None:
        super().__init__(f"Error normalizing JSON ({reason}):\n{text}")
        self.text = text
        self.reason = reason


class DocumentIOError(RestDocError):
    """Raised when an IR document or output location cannot be read, parsed or written."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Failed on document {path!r}: {reason}")
        self.path = path
        self.reason = reason
