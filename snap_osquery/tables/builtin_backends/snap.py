from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from snap_osquery.errors import ParseError
from snap_osquery.util import CommandRunner

DEFAULT_SNAP_PATH = "/usr/bin/snap"

SNAP_COLUMNS = ("name", "version", "rev", "tracking", "publisher", "notes")

# `snap list` prints a header line followed by a separator line.
_PREAMBLE_LINES = 2
_MIN_FIELDS = 5

_logger = logging.getLogger("snap-osquery")


def parse_snap_list(lines: Iterable[str], *, logger: logging.Logger | None = None) -> list[dict[str, str]]:
    """
    Parse `snap list` output into rows keyed by SNAP_COLUMNS.

    The first two lines are dropped by position, whatever they contain. Blank
    lines and lines with fewer than five whitespace-separated fields are
    skipped. A sixth field becomes `notes`; anything after it is ignored.
    """
    log = logger or _logger
    rows: list[dict[str, str]] = []
    for lineno, raw in enumerate(lines, start=1):
        if lineno <= _PREAMBLE_LINES:
            continue
        line = raw.strip()
        if not line:
            continue

        fields = line.split()
        if len(fields) < _MIN_FIELDS:
            log.debug("Skipping snap list line %d: %d fields: %r", lineno, len(fields), line)
            continue

        rows.append(
            {
                "name": fields[0],
                "version": fields[1],
                "rev": fields[2],
                "tracking": fields[3],
                "publisher": fields[4],
                "notes": fields[5] if len(fields) > _MIN_FIELDS else "",
            }
        )
    return rows


def parse_snap_output(output: str, *, logger: logging.Logger | None = None) -> list[dict[str, str]]:
    # Lines end at "\n" only; form feeds or U+2028 inside a line must not
    # shift the preamble count. A trailing "\r" is removed by strip().
    return parse_snap_list(output.split("\n"), logger=logger)


@dataclass(frozen=True)
class SnapBackend:
    runner: CommandRunner
    logger: logging.Logger
    snap_path: str = DEFAULT_SNAP_PATH

    def list_output(self) -> str:
        try:
            res = self.runner.run([self.snap_path, "list"], check=True)
        except UnicodeDecodeError as e:
            raise ParseError(f"Could not read output of {self.snap_path} list: {e}") from e
        return res.stdout

    def list_packages(self) -> list[dict[str, str]]:
        output = self.list_output()
        rows = parse_snap_output(output, logger=self.logger)
        self.logger.debug("Parsed %d snap packages", len(rows))
        return rows
