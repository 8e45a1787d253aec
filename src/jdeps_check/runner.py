# src/jdeps_check/runner.py
from __future__ import annotations

import subprocess
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import IO, List, Optional, Sequence

from loguru import logger

from .command import format_command_line
from .config import JAVA_TOOL_OPTIONS_NOTICE
from .consumer import ConsumerState, consume
from .errors import JDepsExecutionError


@dataclass(frozen=True, slots=True)
class JDepsRun:
    """Everything observed from one finished jdeps process."""
    exit_code: int
    state: ConsumerState
    errors: tuple[str, ...]
    command_line: str

    @property
    def error_output(self) -> str:
        return "\n".join(self.errors)


def _drain_errors(stream: IO[str], sink: List[str]) -> None:
    for line in stream:
        line = line.rstrip("\r\n")
        # the JVM echoes JAVA_TOOL_OPTIONS on stderr, that is not a jdeps warning
        if line.startswith(JAVA_TOOL_OPTIONS_NOTICE):
            continue
        sink.append(line)


class JDepsRunner:
    def __init__(
        self,
        executable: Path,
        working_directory: Optional[Path] = None,
        timeout: Optional[float] = None,
    ):
        """
        :param executable: resolved jdeps executable
        :param working_directory: cwd for the process (None inherits ours)
        :param timeout: seconds before the process is killed (None waits forever)
        """
        self.executable = Path(executable)
        self.working_directory = working_directory
        self.timeout = timeout

    def execute(self, arguments: Sequence[str]) -> JDepsRun:
        """Run jdeps, folding stdout into a ConsumerState. Raises on failure."""
        command = [str(self.executable), *arguments]
        command_line = format_command_line(self.executable, arguments)
        logger.debug(f"Executing: {command_line}")

        try:
            proc = subprocess.Popen(
                command,
                cwd=self.working_directory,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
            )
        except OSError as e:
            raise JDepsExecutionError(
                f"Unable to execute jdeps command: {e}", command_line=command_line
            ) from e

        errors: List[str] = []
        err_reader = threading.Thread(
            target=_drain_errors, args=(proc.stderr, errors), daemon=True
        )
        err_reader.start()

        timed_out = threading.Event()
        timer = None
        if self.timeout is not None:
            def _kill():
                timed_out.set()
                proc.kill()

            timer = threading.Timer(self.timeout, _kill)
            timer.daemon = True
            timer.start()

        try:
            with proc.stdout:
                state = consume(proc.stdout)
            exit_code = proc.wait()
            if timer is not None:
                timer.cancel()
        finally:
            if timer is not None:
                timer.cancel()
            if proc.poll() is None:
                proc.kill()
                proc.wait()
            err_reader.join()
            proc.stderr.close()

        run = JDepsRun(exit_code, state, tuple(errors), command_line)

        # a timer firing after a clean exit has nothing to report
        if timed_out.is_set() and exit_code != 0:
            raise JDepsExecutionError(
                f"jdeps did not finish within {self.timeout} seconds\n"
                f"Command line was: {command_line}\n",
                exit_code=exit_code,
                stderr=run.error_output,
                command_line=command_line,
            )

        output = state.output.strip()
        if exit_code != 0:
            if output:
                logger.info("\n" + output)
            msg = f"\nExit code: {exit_code}"
            if run.error_output:
                msg += f" - {run.error_output}"
            msg += f"\nCommand line was: {command_line}\n\n"
            raise JDepsExecutionError(
                msg, exit_code=exit_code, stderr=run.error_output, command_line=command_line
            )

        if output:
            logger.info("\n" + output)

        warnings = [e.strip() for e in errors if e.strip()]
        if warnings:
            logger.warning("JDeps Warnings")
            for warning in warnings:
                logger.warning(warning)

        return run
