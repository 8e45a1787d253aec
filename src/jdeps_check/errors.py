from __future__ import annotations

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .core import Verdict


class JDepsError(Exception):
    """Base class for every failure raised by jdeps-check."""


class ConfigurationError(JDepsError):
    pass


class ExecutableResolutionError(JDepsError):
    """The jdeps executable could not be located or is unusable."""


class ArgumentError(JDepsError):
    pass


class ConsumerStateError(JDepsError):
    """A line was fed to an output consumer that was already finalized."""


class JDepsExecutionError(JDepsError):
    """
    jdeps could not be started, timed out or returned a non-zero exit code.

    - exit_code: process exit code (None when the process never completed)
    - stderr: captured error stream, JAVA_TOOL_OPTIONS notices removed
    - command_line: the full command line, for diagnostics
    """

    def __init__(
        self,
        message: str,
        exit_code: Optional[int] = None,
        stderr: str = "",
        command_line: str = "",
    ):
        super().__init__(message)
        self.exit_code = exit_code
        self.stderr = stderr
        self.command_line = command_line


class OffendingPackagesError(JDepsError):
    """Offending packages were found and fail-on-warning is enabled."""

    def __init__(self, message: str, verdict: "Verdict"):
        super().__init__(message)
        self.verdict = verdict
