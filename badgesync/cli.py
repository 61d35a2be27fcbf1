"""CLI entrypoints for badgesync commands."""

from __future__ import annotations

import argparse
import asyncio
import os
import sys
from pathlib import Path

from .config import CONFIG_FILENAME, load_inputs, load_settings
from .logging import configure_logging
from .orchestrator import Orchestrator
from .postproc.badges import BadgeRenderer, badge_count
from .reporting import RunReporter
from .validation import (
    ConfigError,
    parse_badge_types,
    parse_products,
    validate_badge_service_url,
    validate_link_mode,
    validate_style,
)


def _add_verbose_option(parser: argparse.ArgumentParser, *, inherit: bool = False) -> None:
    """Add ``-v/--verbose``; subcommands keep the top-level value unless given."""
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if inherit else False,
        help="Log debug detail, including GitHub API requests and the rendered badge block.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="badgesync",
        description="Keep README version badges in sync and publish changes as a pull request.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    sync_parser = subparsers.add_parser(
        "sync",
        help="Update the README badge block from INPUT_* variables and open or refresh a PR.",
    )
    _add_verbose_option(sync_parser, inherit=True)
    sync_parser.add_argument(
        "--workspace",
        default=None,
        help="Repository checkout to operate on (defaults to $GITHUB_WORKSPACE or cwd).",
    )

    render_parser = subparsers.add_parser(
        "render",
        help="Print badge markdown for the given products without touching any files.",
    )
    _add_verbose_option(render_parser, inherit=True)
    render_parser.add_argument(
        "--products",
        required=True,
        help="Newline or comma separated name[:version] entries.",
    )
    render_parser.add_argument("--badge-types", default="health")
    render_parser.add_argument("--style", default="flat")
    render_parser.add_argument("--link-to", default="badge-page")
    render_parser.add_argument("--badge-service-url", default=None)

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP preview service.",
    )
    _add_verbose_option(serve_parser, inherit=True)
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for badgesync commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    in_actions = os.environ.get("GITHUB_ACTIONS") == "true"
    configure_logging(verbose=bool(args.verbose), workflow_commands=in_actions)

    if args.command == "sync":
        try:
            settings = load_settings()
            if args.workspace:
                settings.workspace = Path(args.workspace)
            inputs = load_inputs(os.environ, config_file=settings.workspace / CONFIG_FILENAME)
        except ConfigError as exc:
            parser.exit(1, f"badgesync sync failed: {exc}\n")
        result = asyncio.run(Orchestrator().run(inputs, settings, RunReporter(settings.output_file)))
        if not result.ok:
            parser.exit(1, f"badgesync sync failed: {result.message}\n")
        if result.status == "success":
            print(result.message)
    elif args.command == "render":
        try:
            markdown, count, warnings = _render(args)
        except ConfigError as exc:
            parser.exit(1, f"{exc}\n")
        for warning in warnings:
            print(f"warning: {warning}", file=sys.stderr)
        print(markdown)
        print(f"{count} badge(s)", file=sys.stderr)
    elif args.command == "serve":  # pragma: no cover - integration path
        from .service import run_service

        run_service(host=args.host, port=args.port)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _render(args: argparse.Namespace) -> tuple[str, int, list[str]]:
    renderer = BadgeRenderer(
        style=validate_style(args.style),
        link_mode=validate_link_mode(args.link_to),
        base_url=validate_badge_service_url(args.badge_service_url),
    )
    parsed = parse_products(args.products.replace(",", "\n"))
    categories = parse_badge_types(args.badge_types)
    markdown = renderer.render(parsed.products, categories)
    return markdown, badge_count(parsed.products, categories), parsed.warnings


if __name__ == "__main__":
    main(sys.argv[1:])
