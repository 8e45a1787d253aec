from __future__ import annotations

import json
import re
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional

from .core import Artifact
from .errors import ConfigurationError

JDEPS_TOOL = "jdeps"
JAVA_TOOL_OPTIONS_NOTICE = "Picked up JAVA_TOOL_OPTIONS:"

DEFAULT_CLASSES_DIRECTORY = Path("target/classes")
DEFAULT_TEST_CLASSES_DIRECTORY = Path("target/test-classes")

_PATH_FIELDS = {
    "classes_directory",
    "test_classes_directory",
    "dot_output",
    "output_directory",
}
_PATH_LIST_FIELDS = {"classpath", "test_classpath"}
_STR_LIST_FIELDS = {
    "packages",
    "dependencies_to_analyze_includes",
    "dependencies_to_analyze_excludes",
}
_BOOL_FIELDS = {
    "fail_on_warning",
    "test_fail_on_warning",
    "include_classpath",
    "api_only",
    "profile",
    "recursive",
    "jdkinternals",
}


@dataclass(frozen=True, slots=True)
class JDepsConfig:
    """
    Options for one jdeps invocation. Immutable once execution begins;
    use `with_overrides` to derive a changed copy.
    """
    # decision
    fail_on_warning: bool = True
    test_fail_on_warning: bool = True

    # jdeps options
    multi_release: Optional[str] = None
    dot_output: Optional[Path] = None
    verbose: Optional[str] = None
    packages: tuple[str, ...] = ()
    include: Optional[str] = None
    api_only: bool = False
    profile: bool = False
    recursive: bool = False
    module: Optional[str] = None
    jdkinternals: bool = False

    # target set
    include_classpath: bool = True
    dependencies_to_analyze_includes: Optional[tuple[str, ...]] = None
    dependencies_to_analyze_excludes: Optional[tuple[str, ...]] = None

    # inputs normally supplied by the build system
    classes_directory: Path = DEFAULT_CLASSES_DIRECTORY
    test_classes_directory: Path = DEFAULT_TEST_CLASSES_DIRECTORY
    classpath: tuple[Path, ...] = ()
    test_classpath: tuple[Path, ...] = ()
    artifacts: tuple[Artifact, ...] = ()

    # execution
    toolchain: Optional[str] = None
    output_directory: Optional[Path] = None
    timeout: Optional[float] = None

    def with_overrides(self, **overrides: Any) -> "JDepsConfig":
        """Copy with the given non-None values applied (CLI on top of file)."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        if not changes:
            return self
        return replace(self, **_coerce_all(changes))

    @staticmethod
    def from_mapping(data: Mapping[str, Any]) -> "JDepsConfig":
        known = {f.name for f in fields(JDepsConfig)}
        values: dict[str, Any] = {}
        for key, value in data.items():
            name = _snake_case(key)
            if name not in known:
                raise ConfigurationError(f"Unknown configuration key '{key}'")
            values[name] = value
        return JDepsConfig(**_coerce_all(values))


def load_config(path: Path) -> JDepsConfig:
    """Read a JSON configuration file (camelCase or snake_case keys)."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ConfigurationError(f"Configuration file '{path}' not found") from e
    except OSError as e:
        raise ConfigurationError(f"Could not read configuration file '{path}': {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Could not parse '{path}': {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"'{path}' must contain a JSON object")
    return JDepsConfig.from_mapping(data)


def _snake_case(key: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower()


def _coerce_all(values: Mapping[str, Any]) -> dict[str, Any]:
    return {name: _coerce(name, value) for name, value in values.items()}


def _coerce(name: str, value: Any) -> Any:
    if value is None:
        return None
    if name in _BOOL_FIELDS:
        if not isinstance(value, bool):
            raise ConfigurationError(f"'{name}' must be true or false, got {value!r}")
        return value
    if name in _PATH_FIELDS:
        return Path(value)
    if name in _PATH_LIST_FIELDS:
        return tuple(Path(p) for p in _as_list(name, value))
    if name in _STR_LIST_FIELDS:
        return tuple(str(v) for v in _as_list(name, value))
    if name == "artifacts":
        return tuple(
            a if isinstance(a, Artifact) else Artifact.parse(str(a))
            for a in _as_list(name, value)
        )
    if name == "timeout":
        try:
            timeout = float(value)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"'timeout' must be a number, got {value!r}") from e
        if timeout <= 0:
            raise ConfigurationError("'timeout' must be positive")
        return timeout
    return str(value)


def _as_list(name: str, value: Any) -> list:
    if isinstance(value, (str, Path)):
        return [value]
    if isinstance(value, (list, tuple)):
        return list(value)
    raise ConfigurationError(f"'{name}' must be a list, got {value!r}")
