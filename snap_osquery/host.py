"""
Bridge between table plugins and the osquery extension SDK.

The SDK owns the Thrift transport and the extension registration handshake;
this module only adapts our TablePlugin objects to the SDK's table classes and
hands control to its server loop.
"""

from __future__ import annotations

import sys
from typing import Any

import osquery
from osquery.extensions.ttypes import ExtensionException

from snap_osquery import __version__
from snap_osquery.core import Context, Options
from snap_osquery.errors import HostError
from snap_osquery.tables.api import TablePlugin
from snap_osquery.tables.registry import TableRegistry

EXTENSION_NAME = "snap_packages"
DEFAULT_SOCKET_PATH = "/var/osquery/osquery.em"


def osquery_table_class(table: TablePlugin, ctx: Context) -> type[osquery.TablePlugin]:
    """
    Build an osquery.TablePlugin subclass delegating to `table`.

    The SDK registers plugin classes, not instances, so the table and context
    are bound through a closure.
    """

    class _Table(osquery.TablePlugin):
        def name(self) -> str:
            return table.name

        def columns(self) -> list[osquery.TableColumn]:
            return [osquery.TableColumn(name=c.name, type=c.type) for c in table.columns()]

        def generate(self, context: Any) -> list[dict[str, str]]:
            try:
                return table.generate(ctx, context or {})
            except Exception as e:
                ctx.logger.error("Failed to generate %s: %s", table.name, e)
                raise

    _Table.__name__ = f"OsqueryTable_{table.name}"
    _Table.__qualname__ = _Table.__name__
    return _Table


def extension_argv(options: Options) -> list[str]:
    argv = [
        "--socket",
        options.socket_path,
        "--timeout",
        str(options.timeout),
        "--interval",
        str(options.interval),
    ]
    if options.verbose:
        argv.append("--verbose")
    return argv


def serve(registry: TableRegistry, ctx: Context) -> None:
    """
    Register every table and run the extension until osquery goes away.

    Blocks for the lifetime of the extension. Raises HostError when the
    socket cannot be opened or osquery rejects the registration.
    """
    for table in registry:
        osquery.register_plugin(osquery_table_class(table, ctx))
        ctx.logger.debug("Registered table %s", table.name)

    socket_path = ctx.options.socket_path
    # osquery.start_extension reads its connection flags from sys.argv.
    sys.argv[1:] = extension_argv(ctx.options)
    ctx.logger.info("Connecting to osquery at %s", socket_path)
    try:
        osquery.start_extension(name=EXTENSION_NAME, version=__version__)
    except ExtensionException as e:
        reason = getattr(e, "message", None) or e
        raise HostError(f"Could not register extension with osquery at {socket_path}: {reason}") from e

    # Without --verbose the SDK returns instead of raising when the socket
    # cannot be opened; the server loop itself never returns.
    raise HostError(f"Could not open osquery socket {socket_path}")
