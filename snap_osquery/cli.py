from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from snap_osquery.config_loader import LoadedConfig, default_config_path, load_config_file
from snap_osquery.core import Context, Options, build_context
from snap_osquery.errors import ExtensionError, HostError
from snap_osquery.host import DEFAULT_SOCKET_PATH, serve
from snap_osquery.tables import TableRegistry, builtin_tables
from snap_osquery.tables.builtin_backends.snap import DEFAULT_SNAP_PATH

DEFAULT_TIMEOUT = 1
DEFAULT_INTERVAL = 1


def _setup_logger(verbose: bool) -> logging.Logger:
    logger = logging.getLogger("snap-osquery")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    handler = logging.StreamHandler()
    handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    logger.handlers[:] = [handler]
    logger.propagate = False
    return logger


def _non_negative_int(value: str) -> int:
    n = int(value)
    if n < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {value}")
    return n


def _positive_int(value: str) -> int:
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1: {value}")
    return n


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="snap-osquery")
    parser.add_argument(
        "--socket",
        "-socket",
        dest="socket",
        default=None,
        help=f"Path to the osquery extension manager socket (default: {DEFAULT_SOCKET_PATH}).",
    )
    parser.add_argument(
        "--timeout",
        type=_non_negative_int,
        default=None,
        help="Seconds to wait for the osquery socket to become available.",
    )
    parser.add_argument(
        "--interval",
        type=_positive_int,
        default=None,
        help="Seconds between checks that osquery is still alive.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Settings file (*.json, *.toml, *.yaml, *.yml). "
        "Defaults to ~/.config/snap-osquery/config.* if present.",
    )
    parser.add_argument(
        "--snap-path",
        default=None,
        help=f"Path to the snap binary (default: {DEFAULT_SNAP_PATH}).",
    )
    parser.add_argument(
        "--list-tables",
        action="store_true",
        help="Print the tables this extension provides and exit.",
    )
    parser.add_argument(
        "--print-rows",
        action="store_true",
        help="Generate every table once, print rows as JSON lines and exit without connecting to osquery.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Verbose logs.",
    )
    return parser


def _pick(cli_value, config_value, default):
    if cli_value is not None:
        return cli_value
    if config_value is not None:
        return config_value
    return default


def build_options(args: argparse.Namespace, config: LoadedConfig) -> Options:
    return Options(
        socket_path=_pick(args.socket, config.socket, DEFAULT_SOCKET_PATH),
        timeout=_pick(args.timeout, config.timeout, DEFAULT_TIMEOUT),
        interval=_pick(args.interval, config.interval, DEFAULT_INTERVAL),
        verbose=bool(args.verbose or config.verbose),
        snap_path=_pick(args.snap_path, config.snap_path, DEFAULT_SNAP_PATH),
    )


def _log_tables(registry: TableRegistry, ctx: Context) -> None:
    ctx.logger.info("Loaded %d tables:", len(registry))
    for table in registry:
        columns = ", ".join(c.name for c in table.columns())
        ok, reason = table.is_available(ctx)
        if ok:
            ctx.logger.info("- %s (%s)", table.name, columns)
        else:
            ctx.logger.info(
                "- %s (%s) [UNAVAILABLE: %s]",
                table.name,
                columns,
                reason or "unknown reason",
            )


def _print_rows(registry: TableRegistry, ctx: Context) -> int:
    for table in registry:
        try:
            rows = table.generate(ctx, {})
        except ExtensionError as e:
            ctx.logger.error("Failed to generate %s: %s", table.name, e)
            return 1
        for row in rows:
            sys.stdout.write(json.dumps({"table": table.name, **row}) + "\n")
        ctx.logger.info("%s: %d rows", table.name, len(rows))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logger = _setup_logger(args.verbose)

    config_path: Path | None = args.config
    if config_path is None:
        config_path = default_config_path()
    elif not config_path.exists():
        logger.error("Config file not found: %s", config_path)
        return 2

    config = LoadedConfig(path=None)
    if config_path is not None:
        try:
            config = load_config_file(config_path)
        except (OSError, ValueError) as e:
            logger.error("Failed to load config @ %s: %s", config_path, e)
            return 2
        logger.debug("Loaded config from %s", config_path)

    options = build_options(args, config)
    if options.verbose and not args.verbose:
        logger = _setup_logger(True)

    ctx = build_context(options=options, logger=logger)
    registry = TableRegistry(builtin_tables())

    if args.list_tables:
        for name in registry.registered_tables:
            sys.stdout.write(name + "\n")
        return 0

    if args.print_rows:
        return _print_rows(registry, ctx)

    _log_tables(registry, ctx)
    try:
        serve(registry, ctx)
    except HostError as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
