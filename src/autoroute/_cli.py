"""Autoroute CLI — autoroute routes / autoroute check.

Entry point for the ``autoroute`` command-line interface.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from autoroute.routes.registry import RouteRegistry
    from autoroute.targets import RouteTable


def _add_scan_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("root", nargs="?", default=".", help="Project root directory")
    parser.add_argument("--dir", default=None, help="Controllers directory (relative to root)")
    parser.add_argument(
        "--prefix", action="append", default=None,
        help="Route prefix (repeat for several prefixes)",
    )
    parser.add_argument(
        "--auth", dest="default_requires_auth", action="store_const", const=True, default=None,
        help="Require auth for routes without explicit metadata",
    )
    parser.add_argument(
        "--no-strict", dest="strict", action="store_const", const=False, default=None,
        help="Accept unmarked {'handler': ..., 'meta': ...} exports with a warning",
    )


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the autoroute CLI."""
    parser = argparse.ArgumentParser(
        prog="autoroute",
        description="File-system based HTTP route discovery.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # autoroute routes
    routes_parser = subparsers.add_parser(
        "routes",
        help="List the routes the controllers tree resolves to",
    )
    _add_scan_arguments(routes_parser)

    # autoroute check
    check_parser = subparsers.add_parser(
        "check",
        help="Validate route files; exit 1 if any is skipped with an error",
    )
    _add_scan_arguments(check_parser)

    return parser


def _get_version() -> str:
    """Get the package version."""
    from autoroute import __version__

    return __version__


def _scan(args: argparse.Namespace) -> tuple[RouteTable, RouteRegistry, list[str]]:
    """Run the router quietly against an in-memory table.

    Returns the table, the registry, and every error message logged.
    """
    from autoroute._errors import ConfigError
    from autoroute.config_loader import load_options
    from autoroute.log import ConsoleSink, MemorySink
    from autoroute.router import auto_router
    from autoroute.targets import RouteTable

    errors = MemorySink()

    def collect_errors(level: str, message: str) -> None:
        if level == "error":
            errors.write(level, message)

    try:
        options = load_options(
            Path(args.root),
            dir=args.dir,
            prefix=args.prefix,
            default_requires_auth=args.default_requires_auth,
            strict=args.strict,
        )
        for entry in options:
            entry["logging"] = False
            entry["on_log"] = collect_errors
        router = auto_router(options)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(2) from exc

    table = RouteTable()
    registry = asyncio.run(router(table, sink=ConsoleSink()))
    return table, registry, errors.messages("error")


def _print_routes(table: RouteTable, registry: RouteRegistry) -> None:
    """Print a METHOD / PATH / AUTH table for the registered routes."""
    if not table.rows:
        print("No routes registered.")
        return

    auth = {d.key: d.requires_auth for d in registry.all}
    rows = [
        (row.method, row.path, "yes" if auth.get(f"{row.method} {row.path}") else "")
        for row in sorted(table.rows, key=lambda r: (r.path, r.method))
    ]

    max_method = max(6, *(len(r[0]) for r in rows))  # "METHOD" header
    max_path = max(4, *(len(r[1]) for r in rows))  # "PATH" header
    fmt = f"{{:<{max_method}}}  {{:<{max_path}}}  {{}}"
    print(fmt.format("METHOD", "PATH", "AUTH"))
    print("-" * min(max_method + max_path + 8, 80))
    for method, path, requires_auth in rows:
        print(fmt.format(method, path, requires_auth))


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        table, registry, _errors = _scan(args)
        _print_routes(table, registry)
    elif args.command == "check":
        table, _registry, errors = _scan(args)
        if errors:
            print(f"{len(errors)} route file(s) skipped with errors.", file=sys.stderr)
            sys.exit(1)
        print(f"OK: {len(table)} route(s).")


if __name__ == "__main__":
    main()
