"""Command-line entry point: ``restdoc extract`` and ``restdoc render``."""

from __future__ import annotations

import argparse
import logging
import sys
import tomllib
from collections.abc import Sequence
from typing import Any

import structlog
from pydantic import ValidationError

from restdoc.errors import RestDocError
from restdoc.extract.extractor import run_extraction
from restdoc.models.config import ExtractConfig, RenderConfig, RestDocConfig
from restdoc.render.renderer import run_render

logger = structlog.get_logger("restdoc.cli")


def configure_logging(verbose: bool = False) -> None:
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if verbose else logging.INFO
        ),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="restdoc",
        description="Extract and render REST endpoint and transfer class documentation.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  # Scan a service package and write the IR documents
  restdoc extract --module shop.api --module shop.models -o build/ir

  # Render the IR to HTML with example URLs under /v1
  restdoc render --json-classes build/ir/json_classes.json \\
      --rest-endpoints build/ir/rest_endpoints.json --prefix /v1 -o rest.html

  # Take defaults from the [tool.restdoc] table of pyproject.toml
  restdoc --config pyproject.toml render
""",
    )
    p.add_argument(
        "--config",
        default=None,
        metavar="FILE",
        help="TOML file with a [restdoc] or [tool.restdoc] table; flags override it",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level")
    commands = p.add_subparsers(dest="command", required=True)

    extract = commands.add_parser("extract", help="Scan modules and write the IR documents")
    extract.add_argument(
        "--module",
        action="append",
        dest="modules",
        metavar="MODULE",
        help="Dotted module name to scan (repeatable)",
    )
    extract.add_argument(
        "--search-path",
        action="append",
        dest="search_paths",
        metavar="DIR",
        help="Extra import root (repeatable)",
    )
    extract.add_argument(
        "-o",
        "--output-dir",
        dest="output_dir",
        default=None,
        help="Directory for the IR documents (default: .)",
    )

    render = commands.add_parser("render", help="Render IR documents to HTML")
    render.add_argument(
        "--json-classes",
        action="append",
        dest="json_classes_files",
        metavar="FILE",
        help="Transfer class document (repeatable, merged in order)",
    )
    render.add_argument(
        "--rest-endpoints",
        action="append",
        dest="rest_endpoints_files",
        metavar="FILE",
        help="Endpoint document (repeatable, concatenated in order)",
    )
    render.add_argument(
        "--resolve-path",
        action="append",
        dest="resolution_paths",
        metavar="DIR",
        help="Import root used to look up enums missing from the IR (repeatable)",
    )
    render.add_argument("--prefix", dest="endpoint_prefix", default=None, help="Endpoint path prefix")
    render.add_argument(
        "--host-port",
        dest="example_host_port",
        default=None,
        help="host:port for example URLs (default: localhost:8080)",
    )
    render.add_argument(
        "--no-ssl",
        dest="examples_are_ssl",
        action="store_false",
        default=None,
        help="Use http instead of https in example URLs",
    )
    render.add_argument("-o", "--output", dest="output_path", default=None, help="Output HTML file")
    render.add_argument("--title", default=None, help="Document title")
    return p


def _overrides(args: argparse.Namespace, fields: Sequence[str]) -> dict[str, Any]:
    return {name: getattr(args, name) for name in fields if getattr(args, name, None) is not None}


def load_config(args: argparse.Namespace) -> RestDocConfig:
    """
    Build the effective config: the TOML file (if any) with command-line flags on top.

    Raises:
        OSError, tomllib.TOMLDecodeError, pydantic.ValidationError
    """
    base = RestDocConfig.from_toml(args.config) if args.config else RestDocConfig.default()
    if args.command == "extract":
        updated = base.extract.model_dump()
        updated.update(_overrides(args, ("modules", "search_paths", "output_dir")))
        return base.model_copy(update={"extract": ExtractConfig.model_validate(updated)})
    updated = base.render.model_dump()
    updated.update(
        _overrides(
            args,
            (
                "json_classes_files",
                "rest_endpoints_files",
                "resolution_paths",
                "endpoint_prefix",
                "example_host_port",
                "examples_are_ssl",
                "output_path",
                "title",
            ),
        )
    )
    return base.model_copy(update={"render": RenderConfig.model_validate(updated)})


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = load_config(args)
    except (OSError, tomllib.TOMLDecodeError, ValidationError) as exc:
        logger.error("config_invalid", path=args.config, error=str(exc))
        return 1

    try:
        if args.command == "extract":
            if not config.extract.modules:
                logger.error("no_modules", hint="pass --module or set extract.modules")
                return 1
            result = run_extraction(config.extract)
            logger.info(
                "extract_done",
                transfer_classes=len(result.transfer_classes),
                endpoints=len(result.endpoints),
            )
        else:
            target = run_render(config.render)
            logger.info("render_done", path=str(target))
    except (RestDocError, ImportError) as exc:
        logger.error("run_failed", command=args.command, error=str(exc))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
