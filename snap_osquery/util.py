from __future__ import annotations

import os
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping, Sequence

from snap_osquery.errors import ExecutionError


def xdg_config_home() -> Path:
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))


def expand_path(s: str) -> Path:
    # Expand ~ and $VARS
    return Path(os.path.expandvars(os.path.expanduser(s)))


def sh_join(args: Sequence[str]) -> str:
    return shlex.join(list(args))


def is_executable(p: Path) -> bool:
    try:
        return p.is_file() and os.access(p, os.X_OK)
    except OSError:
        return False


@dataclass(frozen=True)
class RunResult:
    args: list[str]
    returncode: int
    stdout: str
    stderr: str


class CommandRunner:
    def __init__(self, *, logger) -> None:
        self._logger = logger

    def run(
        self,
        args: Iterable[str],
        *,
        check: bool = False,
        env: Mapping[str, str] | None = None,
    ) -> RunResult:
        """
        Run a command synchronously and return its decoded output.

        Output is decoded as strict UTF-8, so undecodable output raises
        UnicodeDecodeError. Failing to spawn the process, or a non-zero exit
        when check=True, raises ExecutionError.
        """
        argv = list(args)

        self._logger.debug("RUN %s", sh_join(argv))

        merged_env = None
        if env is not None:
            merged_env = dict(os.environ)
            merged_env.update(dict(env))

        try:
            cp = subprocess.run(
                argv,
                text=True,
                encoding="utf-8",
                errors="strict",
                capture_output=True,
                check=False,  # we handle below to include logs
                env=merged_env,
            )
        except OSError as e:
            raise ExecutionError(f"Could not run {sh_join(argv)}: {e}") from e

        stderr = cp.stderr or ""
        if check and cp.returncode != 0:
            raise ExecutionError(
                f"Command failed ({cp.returncode}): {sh_join(argv)}\n{stderr}".rstrip(),
                returncode=cp.returncode,
                stderr=stderr,
            )
        return RunResult(
            args=argv,
            returncode=cp.returncode,
            stdout=cp.stdout or "",
            stderr=stderr,
        )
