from __future__ import annotations

import enum
from pathlib import Path
from typing import Mapping, Optional

from loguru import logger

from .command import build_arguments
from .config import JDepsConfig
from .core import AnalysisTarget, Verdict
from .errors import ExecutableResolutionError, OffendingPackagesError
from .locator import find_jdeps
from .runner import JDepsRunner
from .targets import build_target


class Goal(enum.Enum):
    """Which compiled classes are checked: production (`main`) or `test`."""
    MAIN = "jdkinternals"
    TEST = "test-jdkinternals"


class JDKInternalsCheck:
    """
    Checks that compiled classes do not depend on JDK internal APIs:
    - locates jdeps
    - builds the target set and command line
    - runs jdeps and interprets its output
    - fails (or warns) when offending packages were reported
    """

    def __init__(
        self,
        config: JDepsConfig,
        goal: Goal = Goal.MAIN,
        env: Optional[Mapping[str, str]] = None,
    ):
        self.config = config
        self.goal = goal
        self.env = env

    @property
    def classes_directory(self) -> Path:
        if self.goal is Goal.TEST:
            return self.config.test_classes_directory
        return self.config.classes_directory

    @property
    def classpath(self) -> tuple[Path, ...]:
        if self.goal is Goal.TEST:
            return self.config.test_classpath
        return self.config.classpath

    @property
    def fail_on_warning(self) -> bool:
        if self.goal is Goal.TEST:
            return self.config.test_fail_on_warning
        return self.config.fail_on_warning

    def target(self) -> AnalysisTarget:
        return build_target(
            self.classes_directory,
            self.classpath,
            include_classpath=self.config.include_classpath,
            artifacts=self.config.artifacts,
            includes=self.config.dependencies_to_analyze_includes,
            excludes=self.config.dependencies_to_analyze_excludes,
        )

    def find_executable(self) -> Path:
        try:
            return find_jdeps(self.config.toolchain, self.env)
        except ExecutableResolutionError as e:
            raise ExecutableResolutionError(f"Unable to find jdeps command: {e}") from e

    def execute(self) -> Optional[Verdict]:
        """Returns None when there is nothing to analyze."""
        if not self.classes_directory.exists():
            logger.debug("No classes to analyze")
            return None

        executable = self.find_executable()
        target = self.target()
        arguments = build_arguments(self.config, target)

        runner = JDepsRunner(
            executable,
            working_directory=self.config.output_directory,
            timeout=self.config.timeout,
        )
        run = runner.execute(arguments)

        verdict = Verdict(
            offending_packages=run.state.offending_packages,
            profiles=run.state.profiles,
            fail_on_warning=self.fail_on_warning,
            exit_code=run.exit_code,
            output=run.state.raw_lines,
            warnings=run.errors,
        )
        return self.decide(verdict)

    @staticmethod
    def decide(verdict: Verdict) -> Verdict:
        if not verdict.has_offending_packages:
            return verdict

        report = verdict.offending_report()
        if verdict.fail_on_warning:
            raise OffendingPackagesError(report, verdict)

        logger.warning(report.rstrip())
        return verdict
