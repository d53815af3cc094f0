"""Small composite blocks built from sink primitives."""

from __future__ import annotations

from restdoc.render.sink import Sink
from restdoc.render.types import type_anchor


def heading(sink: Sink, level: int, text: str, anchor: str | None = None) -> None:
    sink.section(level)
    sink.section_title(level)
    if anchor is not None:
        sink.anchor(anchor)
        sink.end_anchor()
    sink.text(text)
    sink.end_section_title(level)
    sink.end_section(level)


def class_heading(sink: Sink, class_name: str) -> None:
    heading(sink, 3, f"Type: {class_name}", anchor=type_anchor(class_name))


def table_of_contents_header(sink: Sink) -> None:
    heading(sink, 2, "Table Of Contents")


def bold_text(sink: Sink, text: str) -> None:
    sink.bold()
    sink.text(text)
    sink.end_bold()


def monospaced_text(sink: Sink, text: str) -> None:
    sink.monospaced()
    sink.text(text)
    sink.end_monospaced()
