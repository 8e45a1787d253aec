"""
Interpreter for jdeps standard output.

The output is folded one line at a time into an immutable `ConsumerState`:

    state = ConsumerState()
    for line in lines:
        state = consume_line(state, line)
    state = finalize(state)

`consume(lines)` does the same fold in a single pass and is what the runner
uses, since copying the state per line grows quadratically on large outputs.

Two line shapes are recognised. Internal API usage:

    JDK 9+:        -> sun.misc     JDK internal API (java.base)
    JDK 8 Linux:   -> sun.misc     JDK internal API (JDK removed internal API)
    JDK 8u291:     -> sun.misc     JDK removed internal API

and profile/module association (`-P`, or plain module names on JDK 9+):

    -> java.io     compact1
"""
from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Iterable, Mapping

from .errors import ConsumerStateError

JDK_INTERNAL_API = re.compile(r".+->\s([a-z\.]+)\s+(JDK (?:removed )?internal API.*)")
PROFILE = re.compile(r"\s+->\s([a-z\.]+)\s+(\S+)")


class Phase(enum.Enum):
    IDLE = "idle"
    CONSUMING = "consuming"
    FINALIZED = "finalized"


@dataclass(frozen=True, slots=True)
class ConsumerState:
    """
    - offending_packages: package -> internal API description
    - profiles: package -> profile or module
    - raw_lines: every line seen, matching or not
    """
    phase: Phase = Phase.IDLE
    offending_packages: Mapping[str, str] = field(default_factory=dict)
    profiles: Mapping[str, str] = field(default_factory=dict)
    raw_lines: tuple[str, ...] = ()

    @property
    def output(self) -> str:
        return "\n".join(self.raw_lines)


def classify(line: str) -> tuple[str, str, str] | None:
    """
    ("internal", package, description), ("profile", package, label) or None.
    Internal API is tried first and a match there is final.
    """
    m = JDK_INTERNAL_API.fullmatch(line)
    if m:
        return "internal", m.group(1), m.group(2)

    m = PROFILE.fullmatch(line)
    if m:
        return "profile", m.group(1), m.group(2)

    return None


def consume_line(state: ConsumerState, line: str) -> ConsumerState:
    if state.phase is Phase.FINALIZED:
        raise ConsumerStateError("Cannot consume output after the stream has ended")

    offending = state.offending_packages
    profiles = state.profiles

    match classify(line):
        case ("internal", package, description):
            offending = {**offending, package: description}
        case ("profile", package, label):
            profiles = {**profiles, package: label}

    return replace(
        state,
        phase=Phase.CONSUMING,
        offending_packages=offending,
        profiles=profiles,
        raw_lines=state.raw_lines + (line,),
    )


def finalize(state: ConsumerState) -> ConsumerState:
    """End of stream: freeze both mappings. Finalizing twice is a no-op."""
    if state.phase is Phase.FINALIZED:
        return state
    return replace(
        state,
        phase=Phase.FINALIZED,
        offending_packages=MappingProxyType(dict(state.offending_packages)),
        profiles=MappingProxyType(dict(state.profiles)),
    )


def consume(lines: Iterable[str]) -> ConsumerState:
    """
    Fold a whole stream in one pass. Same result as repeated `consume_line`,
    but accumulates into local containers so large outputs stay linear.
    """
    offending: dict[str, str] = {}
    profiles: dict[str, str] = {}
    raw: list[str] = []

    for line in lines:
        line = line.rstrip("\r\n")
        raw.append(line)
        match classify(line):
            case ("internal", package, description):
                offending[package] = description
            case ("profile", package, label):
                profiles[package] = label

    state = ConsumerState(
        phase=Phase.CONSUMING if raw else Phase.IDLE,
        offending_packages=offending,
        profiles=profiles,
        raw_lines=tuple(raw),
    )
    return finalize(state)
