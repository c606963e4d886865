from __future__ import annotations


class ExtensionError(RuntimeError):
    """Base class for errors raised while producing table rows."""


class ExecutionError(ExtensionError):
    """The listing command could not be started or exited with a failure status."""

    def __init__(self, message: str, *, returncode: int | None = None, stderr: str = "") -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class ParseError(ExtensionError):
    """The command output could not be read as text."""


class HostError(ExtensionError):
    """The extension could not register with, or stay connected to, osquery."""
