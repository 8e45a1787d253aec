from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional, Sequence

from loguru import logger

from .core import AnalysisTarget, Artifact
from .patterns import MatchPatterns


def select_artifacts(
    artifacts: Iterable[Artifact],
    includes: Sequence[str],
    excludes: Optional[Sequence[str]] = None,
) -> list[Artifact]:
    """
    Artifacts whose `groupId:artifactId` matches an include pattern and no
    exclude pattern. Excludes only narrow the includes, they never select.
    """
    include_patterns = MatchPatterns(includes)
    exclude_patterns = MatchPatterns(excludes or ())

    selected = []
    for artifact in artifacts:
        key = artifact.versionless_key
        if include_patterns.matches(key) and not exclude_patterns.matches(key):
            selected.append(artifact)
        else:
            logger.debug(f"Not analyzing dependency {key}")
    return selected


def dependencies_to_analyze(
    classes_directory: Path,
    classpath: Iterable[Path],
    include_classpath: bool = True,
    artifacts: Iterable[Artifact] = (),
    includes: Optional[Sequence[str]] = None,
    excludes: Optional[Sequence[str]] = None,
) -> tuple[Path, ...]:
    # dict keeps first-insertion order and drops repeats
    paths: dict[Path, None] = {Path(classes_directory): None}

    if include_classpath:
        for entry in classpath:
            paths.setdefault(Path(entry), None)

    if includes is not None:
        for artifact in select_artifacts(artifacts, includes, excludes):
            paths.setdefault(Path(artifact.file), None)

    return tuple(paths)


def build_target(
    classes_directory: Path,
    classpath: Sequence[Path],
    include_classpath: bool = True,
    artifacts: Iterable[Artifact] = (),
    includes: Optional[Sequence[str]] = None,
    excludes: Optional[Sequence[str]] = None,
) -> AnalysisTarget:
    classpath = tuple(dict.fromkeys(Path(p) for p in classpath))
    paths = dependencies_to_analyze(
        classes_directory, classpath, include_classpath, artifacts, includes, excludes
    )
    return AnalysisTarget(paths=paths, classpath=classpath)
