from __future__ import annotations

import logging
from dataclasses import dataclass

from snap_osquery.util import CommandRunner


@dataclass(frozen=True)
class Options:
    socket_path: str
    timeout: int
    interval: int
    verbose: bool
    snap_path: str


@dataclass(frozen=True)
class Context:
    logger: logging.Logger
    runner: CommandRunner
    options: Options


def build_context(
    *,
    options: Options,
    logger: logging.Logger,
) -> Context:
    runner = CommandRunner(logger=logger)

    return Context(
        logger=logger,
        runner=runner,
        options=options,
    )
