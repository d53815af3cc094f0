"""
Example 01: Document a Service
==============================

Demonstrates the whole pipeline on a small bookstore service defined in
this file:
- Marking endpoints and transfer types with restdoc markers
- Extracting the IR with DeclarationScanner and Extractor
- Writing json_classes.json / rest_endpoints.json
- Rendering both into a single HTML page

Run:
    uv run python examples/01_document_service.py
"""

import enum
import io
import sys
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

# Add project root to path when running directly
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from restdoc import markers as rd  # noqa: E402


@rd.doc_enum
class Format(enum.Enum):
    """How a book is delivered."""

    PAPER = "paper"
    """Printed and shipped."""
    EBOOK = "ebook"
    """Downloaded."""


@dataclass
class Book:
    """A book in the catalogue. Prices are in cents; see {@link #Format}."""

    isbn: Annotated[str, rd.JsonProperty()]
    title: Annotated[str, rd.JsonProperty()]
    price: Annotated[int, rd.JsonProperty("priceCents")]
    formats: Annotated[list[Format], rd.JsonProperty()]


@rd.path("/books")
class BookResource:
    @rd.get
    @rd.path("/{isbn}")
    @rd.produces("application/json")
    @rd.example_args("isbn=978-0135957059")
    @rd.example_response('{"title": "The Pragmatic Programmer", "isbn": "978-0135957059"}')
    def fetch(self, isbn: Annotated[str, rd.PathParam("isbn"), rd.ArgumentDoc("ISBN-13.")]) -> Book:
        """Fetch one book by ISBN."""

    @rd.put
    @rd.path("/{isbn}")
    @rd.consumes("application/json")
    @rd.example_args("isbn=978-0135957059")
    @rd.example_request('{"priceCents": 4999, "title": "The Pragmatic Programmer"}')
    def update(self, isbn: Annotated[str, rd.PathParam("isbn")], book: Book) -> None:
        """Replace a book."""


def main() -> None:
    from restdoc import DocumentRenderer, Extractor, HtmlSink, RenderConfig
    from restdoc.extract import DeclarationScanner

    print("=== restdoc Document a Service Example ===\n")

    extractor = Extractor()
    extractor.process(DeclarationScanner().scan([sys.modules[__name__]]))
    result = extractor.finish()

    out_dir = Path(tempfile.mkdtemp(prefix="restdoc_example_"))
    written = result.write(out_dir)
    for name, path in written.items():
        print(f"  wrote {name:<22} -> {path}")

    print("\nEndpoints:")
    for method in result.endpoints:
        print(f"  {method.http_method:<6} {method.path}")

    config = RenderConfig(examples_are_ssl=False, endpoint_prefix="/api")
    buffer = io.StringIO()
    DocumentRenderer(config).render(
        HtmlSink(buffer, title="Bookstore API"), result.transfer_classes, result.endpoints
    )
    page = out_dir / "rest.html"
    page.write_text(buffer.getvalue(), encoding="utf-8")
    print(f"\nRendered {len(buffer.getvalue())} characters to {page}")


if __name__ == "__main__":
    main()
