"""Doc-comment text transforms."""

from __future__ import annotations

import re

from restdoc.render.sink import Sink

LINK_PATTERN = re.compile(r"\{@link ([^}]*)\}")
ROLE_PATTERN = re.compile(
    r":(?:py:)?(?:class|meth|func|attr|mod|exc|data|obj):`~?([^`]+)`"
)
_BLANK_LINE = re.compile(r"^\s*$", re.MULTILINE)


def _code(match: re.Match[str]) -> str:
    target = match.group(1)
    if target.startswith("#"):
        target = target[1:]
    return f"<code>{target}</code>"


def linkify(doc: str) -> str:
    """Rewrite ``{@link Target}`` and Sphinx roles such as ``:class:`Target``` to inline code."""
    return ROLE_PATTERN.sub(_code, LINK_PATTERN.sub(_code, doc))


def paragraphify(doc: str) -> str:
    """Turn every blank line into a paragraph boundary."""
    return _BLANK_LINE.sub("</p>\n<p>", doc)


def output_javadoc(sink: Sink, doc: str | None) -> None:
    """Emit ``doc`` as one or more paragraphs. An absent doc emits an empty paragraph."""
    sink.paragraph()
    if doc is not None:
        sink.raw_text(paragraphify(linkify(doc)))
    sink.end_paragraph()
