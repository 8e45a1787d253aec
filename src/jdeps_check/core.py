# src/jdeps_check/core.py
from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .errors import ArgumentError

# groupId:artifactId[:version]=path
_ARTIFACT_RE = re.compile(r"^([^:=\s]+):([^:=\s]+)(?::([^:=\s]+))?=(.+)$")


@dataclass(frozen=True, slots=True)
class Artifact:
    """A resolved dependency artifact that may be selected for analysis."""
    group_id: str
    artifact_id: str
    file: Path
    version: Optional[str] = None

    @property
    def versionless_key(self) -> str:
        return f"{self.group_id}:{self.artifact_id}"

    @staticmethod
    def parse(spec: str) -> "Artifact":
        m = _ARTIFACT_RE.match(spec.strip())
        if not m:
            raise ArgumentError(
                f"Bad artifact '{spec}', expected groupId:artifactId[:version]=path"
            )
        group_id, artifact_id, version, file = m.groups()
        return Artifact(group_id, artifact_id, Path(file), version)

    def __str__(self) -> str:
        coords = self.versionless_key
        if self.version:
            coords += f":{self.version}"
        return f"{coords}={self.file}"


@dataclass(frozen=True, slots=True)
class AnalysisTarget:
    """
    What jdeps is pointed at.

    - paths: ordered, duplicate-free classes/archives to analyze
    - classpath: context entries, only used for -cp when not already in paths
    """
    paths: tuple[Path, ...]
    classpath: tuple[Path, ...] = ()

    def classpath_context(self) -> list[Path]:
        analyzed = set(self.paths)
        return [p for p in self.classpath if p not in analyzed]


@dataclass(frozen=True, slots=True)
class Verdict:
    """Outcome of one jdeps run, computed after the output stream ended."""
    offending_packages: Mapping[str, str]
    profiles: Mapping[str, str]
    fail_on_warning: bool = True
    exit_code: int = 0
    output: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def has_offending_packages(self) -> bool:
        return bool(self.offending_packages)

    @property
    def failed(self) -> bool:
        if self.exit_code != 0:
            return True
        return self.has_offending_packages and self.fail_on_warning

    def offending_report(self) -> str:
        lines = ["Found offending packages:"]
        for package, description in self.offending_packages.items():
            lines.append(f" {package} -> {description}")
        return os.linesep.join(lines) + os.linesep
