"""
Shared fixtures for snap-osquery tests.
"""

import logging
from unittest.mock import Mock

import pytest

from snap_osquery.core import Context, Options
from snap_osquery.util import CommandRunner, RunResult

SNAP_LIST_OUTPUT = (
    "Name  Version  Rev  Tracking  Publisher  Notes\n"
    "----  -------  ---  --------  ---------  -----\n"
    "core20  20230101  1234  latest/stable  canonical**  base\n"
    "hello   2.10      50    latest/stable  canonical    -\n"
)


@pytest.fixture
def logger():
    return logging.getLogger("snap-osquery-test")


@pytest.fixture
def options():
    return Options(
        socket_path="/tmp/osquery-test.em",
        timeout=3,
        interval=5,
        verbose=False,
        snap_path="/usr/bin/snap",
    )


@pytest.fixture
def fake_runner():
    """CommandRunner double whose run() returns a successful snap list."""
    runner = Mock(spec=CommandRunner)
    runner.run.return_value = RunResult(
        args=["/usr/bin/snap", "list"],
        returncode=0,
        stdout=SNAP_LIST_OUTPUT,
        stderr="",
    )
    return runner


@pytest.fixture
def ctx(logger, fake_runner, options):
    return Context(logger=logger, runner=fake_runner, options=options)
