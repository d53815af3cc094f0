"""Document emission backends driven by the renderer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TextIO

from jinja2 import Environment
from markupsafe import Markup, escape


class Sink(ABC):
    """
    Primitive, well-nested document operations.

    Every ``foo()`` has a matching ``end_foo()``. The renderer only ever calls
    these methods and never inspects a sink's state.
    """

    @abstractmethod
    def section(self, level: int) -> None: ...

    @abstractmethod
    def end_section(self, level: int) -> None: ...

    @abstractmethod
    def section_title(self, level: int) -> None: ...

    @abstractmethod
    def end_section_title(self, level: int) -> None: ...

    @abstractmethod
    def anchor(self, name: str) -> None: ...

    @abstractmethod
    def end_anchor(self) -> None: ...

    @abstractmethod
    def link(self, target: str) -> None:
        """Begin a hyperlink to ``target`` (a ``#fragment`` or URL)."""

    @abstractmethod
    def end_link(self) -> None: ...

    @abstractmethod
    def text(self, text: str) -> None:
        """Emit plain text. The sink escapes it for its output format."""

    @abstractmethod
    def raw_text(self, text: str) -> None:
        """Emit pre-escaped markup verbatim."""

    @abstractmethod
    def paragraph(self) -> None: ...

    @abstractmethod
    def end_paragraph(self) -> None: ...

    @abstractmethod
    def bullet_list(self) -> None: ...

    @abstractmethod
    def end_bullet_list(self) -> None: ...

    @abstractmethod
    def list_item(self) -> None: ...

    @abstractmethod
    def end_list_item(self) -> None: ...

    @abstractmethod
    def definition_list(self) -> None: ...

    @abstractmethod
    def end_definition_list(self) -> None: ...

    @abstractmethod
    def defined_term(self) -> None: ...

    @abstractmethod
    def end_defined_term(self) -> None: ...

    @abstractmethod
    def definition(self) -> None: ...

    @abstractmethod
    def end_definition(self) -> None: ...

    @abstractmethod
    def bold(self) -> None: ...

    @abstractmethod
    def end_bold(self) -> None: ...

    @abstractmethod
    def monospaced(self) -> None: ...

    @abstractmethod
    def end_monospaced(self) -> None: ...

    @abstractmethod
    def line_break(self) -> None: ...

    @abstractmethod
    def non_breaking_space(self) -> None: ...

    @abstractmethod
    def flush(self) -> None: ...

    @abstractmethod
    def close(self) -> None: ...


_PAGE_TEMPLATE = """\
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{{ title }}</title>
</head>
<body>
{{ body }}
</body>
</html>
"""

_HEADINGS = {1: "h1", 2: "h2", 3: "h3", 4: "h4"}


class HtmlSink(Sink):
    """
    Sink producing a standalone HTML page.

    Fragments are buffered; the page is rendered through a Jinja2 template and
    written to ``output`` only on :meth:`close`, so a render that fails part
    way leaves ``output`` untouched.

    Example::

        buffer = io.StringIO()
        sink = HtmlSink(buffer, title="Shop API")
        DocumentRenderer(config).render(sink)
        Path("rest.html").write_text(buffer.getvalue())
    """

    def __init__(self, output: TextIO, title: str = "REST Endpoints And Transfer Classes") -> None:
        self._output = output
        self._title = title
        self._parts: list[str] = []
        self._closed = False
        self._template = Environment(autoescape=True).from_string(_PAGE_TEMPLATE)

    def _emit(self, fragment: str) -> None:
        if self._closed:
            raise RuntimeError("HtmlSink is closed")
        self._parts.append(fragment)

    @staticmethod
    def _heading(level: int) -> str:
        if level not in _HEADINGS:
            raise ValueError(f"section level must be 1-4, got {level}")
        return _HEADINGS[level]

    def section(self, level: int) -> None:
        self._heading(level)
        self._emit(f'<section class="section{level}">')

    def end_section(self, level: int) -> None:
        self._heading(level)
        self._emit("</section>\n")

    def section_title(self, level: int) -> None:
        self._emit(f"<{self._heading(level)}>")

    def end_section_title(self, level: int) -> None:
        self._emit(f"</{self._heading(level)}>")

    def anchor(self, name: str) -> None:
        self._emit(f'<a id="{escape(name)}">')

    def end_anchor(self) -> None:
        self._emit("</a>")

    def link(self, target: str) -> None:
        self._emit(f'<a href="{escape(target)}">')

    def end_link(self) -> None:
        self._emit("</a>")

    def text(self, text: str) -> None:
        self._emit(str(escape(text)))

    def raw_text(self, text: str) -> None:
        self._emit(text)

    def paragraph(self) -> None:
        self._emit("<p>")

    def end_paragraph(self) -> None:
        self._emit("</p>\n")

    def bullet_list(self) -> None:
        self._emit("<ul>\n")

    def end_bullet_list(self) -> None:
        self._emit("</ul>\n")

    def list_item(self) -> None:
        self._emit("<li>")

    def end_list_item(self) -> None:
        self._emit("</li>\n")

    def definition_list(self) -> None:
        self._emit("<dl>\n")

    def end_definition_list(self) -> None:
        self._emit("</dl>\n")

    def defined_term(self) -> None:
        self._emit("<dt>")

    def end_defined_term(self) -> None:
        self._emit("</dt>\n")

    def definition(self) -> None:
        self._emit("<dd>")

    def end_definition(self) -> None:
        self._emit("</dd>\n")

    def bold(self) -> None:
        self._emit("<b>")

    def end_bold(self) -> None:
        self._emit("</b>")

    def monospaced(self) -> None:
        self._emit("<tt>")

    def end_monospaced(self) -> None:
        self._emit("</tt>")

    def line_break(self) -> None:
        self._emit("<br />\n")

    def non_breaking_space(self) -> None:
        self._emit("&nbsp;")

    def body(self) -> str:
        """The HTML emitted so far, without the page shell."""
        return "".join(self._parts)

    def flush(self) -> None:
        self._output.flush()

    def close(self) -> None:
        if self._closed:
            return
        page = self._template.render(title=self._title, body=Markup(self.body()))
        self._output.write(page)
        self._output.flush()
        self._closed = True
