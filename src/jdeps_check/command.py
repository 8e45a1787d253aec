from __future__ import annotations

import os
import shlex
from pathlib import Path
from typing import Sequence

from .config import JDepsConfig
from .core import AnalysisTarget


def build_options(config: JDepsConfig, target: AnalysisTarget) -> list[str]:
    """
    jdeps flags for `config`, in the order jdeps expects them.
    Classes are not included, see `build_arguments`.
    """
    args: list[str] = []

    if config.dot_output is not None:
        args += ["-dotoutput", str(config.dot_output)]

    if config.verbose:
        if config.verbose == "class":
            args.append("-verbose:class")
        elif config.verbose == "package":
            args.append("-verbose:package")
        else:
            args.append("-v")

    cp = target.classpath_context()
    if cp:
        args += ["-cp", os.pathsep.join(str(p) for p in cp)]

    for package in config.packages:
        args += ["-p", package]

    if config.include:
        args += ["-include", config.include]

    if config.profile:
        args.append("-P")

    if config.module:
        args += ["-m", config.module]

    if config.multi_release:
        args += ["--multi-release", config.multi_release]

    if config.api_only:
        args.append("-apionly")

    if config.recursive:
        args.append("-R")

    if config.jdkinternals:
        args.append("-jdkinternals")

    return args


def build_arguments(config: JDepsConfig, target: AnalysisTarget) -> list[str]:
    # classes (dirs, jars, .class files) must trail all flags
    return build_options(config, target) + [str(p) for p in target.paths]


def format_command_line(executable: Path | str, arguments: Sequence[str]) -> str:
    return " ".join(shlex.quote(str(part)) for part in [executable, *arguments])
