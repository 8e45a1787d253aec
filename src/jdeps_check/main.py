#!/usr/bin/env python3
from __future__ import annotations

import argparse
import os
import platform
import sys
from pathlib import Path
from typing import Optional, Sequence

from loguru import logger

from . import __version__
from .analysis import Goal, JDKInternalsCheck
from .config import JDepsConfig, load_config
from .errors import JDepsError


def print_info():
    print("jdeps-check")
    print(__version__)
    print("JDK internal API usage check (jdeps)")
    print(
        f"{platform.system()} {platform.release()} ({platform.machine()}), Python {platform.python_version()}"
    )


def setup_logging(debug: bool = False):
    logger.remove()
    logger.add(sys.stderr, format="[{level}] {message}", level="DEBUG" if debug else "INFO")
    logger.debug(f"Logging initialized (debug={debug})")


def _split_paths(values: Optional[list[str]]) -> Optional[list[str]]:
    if values is None:
        return None
    return [p for value in values for p in value.split(os.pathsep) if p]


def _add_jdeps_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", type=Path, help="JSON configuration file")

    # Decision
    parser.add_argument(
        "--fail-on-warning",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Fail when offending packages are found (default: true)",
    )

    # jdeps options
    parser.add_argument("--multi-release", help="Version used for multi-release jars (>=9 or 'base')")
    parser.add_argument("--dot-output", type=Path, help="Destination directory for DOT file output")
    parser.add_argument(
        "--verbose-mode",
        dest="verbose",
        help="'class', 'package', or anything else for all class level dependencies",
    )
    parser.add_argument(
        "--package", dest="packages", action="append", help="Find dependences matching this package (repeatable)"
    )
    parser.add_argument("--include", help="Restrict analysis to classes matching this pattern")
    parser.add_argument("--api-only", action="store_true", default=None, help="Restrict analysis to APIs")
    parser.add_argument("--profile", action="store_true", default=None, help="Show profile or module of a package")
    parser.add_argument("--recursive", action="store_true", default=None, help="Recursively traverse dependencies")
    parser.add_argument("--module", help="Root module for analysis")
    parser.add_argument("--jdkinternals", action="store_true", default=None, help="Show only internal API usage")

    # Target set
    parser.add_argument(
        "--include-classpath",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Analyze classpath entries too, not only the classes (default: true)",
    )
    parser.add_argument(
        "--dependencies-include",
        dest="dependencies_to_analyze_includes",
        action="append",
        help="groupId:artifactId ant pattern of artifacts to analyze (repeatable)",
    )
    parser.add_argument(
        "--dependencies-exclude",
        dest="dependencies_to_analyze_excludes",
        action="append",
        help="groupId:artifactId ant pattern removed from the includes (repeatable)",
    )
    parser.add_argument("--classes-directory", type=Path, help="Compiled classes (default: target/classes)")
    parser.add_argument(
        "--test-classes-directory", type=Path, help="Compiled test classes (default: target/test-classes)"
    )
    parser.add_argument("--classpath", action="append", help=f"Classpath entries, '{os.pathsep}' separated")
    parser.add_argument("--test-classpath", action="append", help="Test classpath entries")
    parser.add_argument(
        "--artifact",
        dest="artifacts",
        action="append",
        help="Dependency artifact as groupId:artifactId[:version]=path (repeatable)",
    )

    # Execution
    parser.add_argument("--toolchain", help="jdeps executable, or the directory containing it")
    parser.add_argument("--output-directory", type=Path, help="Working directory for jdeps")
    parser.add_argument("--timeout", type=float, help="Kill jdeps after this many seconds")


def parse_args(argv: Optional[Sequence[str]] = None):
    parser = argparse.ArgumentParser(
        "jdeps-check", description="Detect usage of JDK internal APIs with jdeps"
    )
    parser.add_argument("--info", action="store_true", help="Print tool info and exit")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="goal")
    main_goal = sub.add_parser(Goal.MAIN.value, help="Check compiled classes")
    _add_jdeps_options(main_goal)
    test_goal = sub.add_parser(Goal.TEST.value, help="Check compiled test classes")
    _add_jdeps_options(test_goal)

    args = parser.parse_args(argv)
    if not args.info and args.goal is None:
        parser.error(f"a goal is required ({Goal.MAIN.value} or {Goal.TEST.value})")
    return args


def build_config(args) -> JDepsConfig:
    config = load_config(args.config) if args.config else JDepsConfig()

    goal = Goal(args.goal)
    fail_on_warning_key = "test_fail_on_warning" if goal is Goal.TEST else "fail_on_warning"

    return config.with_overrides(
        **{fail_on_warning_key: args.fail_on_warning},
        multi_release=args.multi_release,
        dot_output=args.dot_output,
        verbose=args.verbose,
        packages=args.packages,
        include=args.include,
        api_only=args.api_only,
        profile=args.profile,
        recursive=args.recursive,
        module=args.module,
        jdkinternals=args.jdkinternals,
        include_classpath=args.include_classpath,
        dependencies_to_analyze_includes=args.dependencies_to_analyze_includes,
        dependencies_to_analyze_excludes=args.dependencies_to_analyze_excludes,
        classes_directory=args.classes_directory,
        test_classes_directory=args.test_classes_directory,
        classpath=_split_paths(args.classpath),
        test_classpath=_split_paths(args.test_classpath),
        artifacts=args.artifacts,
        toolchain=args.toolchain,
        output_directory=args.output_directory,
        timeout=args.timeout,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.debug)

    if args.info:
        print_info()
        return 0

    try:
        config = build_config(args)
        JDKInternalsCheck(config, Goal(args.goal)).execute()
    except JDepsError as e:
        logger.error(str(e).strip())
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
