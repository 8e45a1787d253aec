from __future__ import annotations

import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Mapping, Optional, Sequence

from loguru import logger

from .config import JDEPS_TOOL
from .errors import ExecutableResolutionError


def is_windows(os_name: str) -> bool:
    return os_name == "nt"


def executable_name(os_name: str = os.name) -> str:
    return JDEPS_TOOL + (".exe" if is_windows(os_name) else "")


def _is_executable(path: Path) -> bool:
    return os.access(path, os.X_OK)


class LocatorStrategy(ABC):
    """
    One way of finding jdeps. `locate` returns:
       - a Path when the executable was found
       - None when the strategy does not apply (try the next one)
    and raises ExecutableResolutionError for a definitive failure.
    """

    name: str = "strategy"

    @abstractmethod
    def locate(self, env: Mapping[str, str], os_name: str) -> Optional[Path]:
        ...


class ToolchainStrategy(LocatorStrategy):
    """Explicit hint: a jdeps executable, or the directory containing it."""

    name = "toolchain"

    def __init__(self, hint: Optional[str]):
        self.hint = hint

    def locate(self, env, os_name):
        if not self.hint:
            return None

        exe = Path(self.hint)
        if exe.is_dir():
            exe = exe / executable_name(os_name)

        if is_windows(os_name) and "." not in exe.name:
            exe = exe.with_name(exe.name + ".exe")

        if not exe.is_file():
            raise ExecutableResolutionError(
                f"The jdeps executable '{exe}' doesn't exist or is not a file."
            )
        return exe.absolute()


class JavaHomeStrategy(LocatorStrategy):
    name = "JAVA_HOME"

    def locate(self, env, os_name):
        java_home = env.get("JAVA_HOME")
        if not java_home:
            return None

        home = Path(java_home).resolve()
        if not home.exists() or home.is_file():
            raise ExecutableResolutionError(
                f"The environment variable JAVA_HOME={java_home} "
                "doesn't exist or is not a valid directory."
            )

        exe = Path(java_home) / "bin" / executable_name(os_name)
        if not exe.resolve().is_file():
            logger.debug(f"No {exe.name} in {exe.parent}")
            return None

        if not _is_executable(exe):
            raise ExecutableResolutionError(f"The jdeps executable '{exe}' is not executable.")
        return exe.absolute()


class PathStrategy(LocatorStrategy):
    name = "PATH"

    def locate(self, env, os_name):
        path = env.get("PATH") or env.get("Path") or env.get("path")
        if path is None:
            return None

        separator = ";" if is_windows(os_name) else ":"
        for entry in path.split(separator):
            if not entry.strip():
                continue
            candidate = (Path(entry) / executable_name(os_name)).resolve()
            if candidate.is_file() and _is_executable(candidate):
                return candidate.absolute()
        return None


NOT_FOUND_MESSAGE = (
    "Unable to locate the jdeps executable. Verify that JAVA_HOME is set correctly "
    "or ensure that jdeps is available on the system PATH."
)


class ExecutableLocator:
    """Evaluates strategies in order; the first path found or error raised wins."""

    def __init__(self, strategies: Sequence[LocatorStrategy]):
        self.strategies = list(strategies)

    def locate(
        self,
        env: Optional[Mapping[str, str]] = None,
        os_name: str = os.name,
    ) -> Path:
        env = os.environ if env is None else env
        for strategy in self.strategies:
            exe = strategy.locate(env, os_name)
            if exe is not None:
                logger.debug(f"Found jdeps via {strategy.name}: {exe}")
                return exe
        raise ExecutableResolutionError(NOT_FOUND_MESSAGE)


def default_locator(toolchain: Optional[str] = None) -> ExecutableLocator:
    return ExecutableLocator([ToolchainStrategy(toolchain), JavaHomeStrategy(), PathStrategy()])


def find_jdeps(
    toolchain: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    os_name: str = os.name,
) -> Path:
    return default_locator(toolchain).locate(env, os_name)
