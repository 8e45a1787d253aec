import stat
import sys
from pathlib import Path

import pytest
from loguru import logger


@pytest.fixture
def log_records():
    """(level, message) pairs emitted through loguru while the test runs."""
    records = []
    handler_id = logger.add(
        lambda m: records.append((m.record["level"].name, m.record["message"])),
        level="DEBUG",
    )
    yield records
    logger.remove(handler_id)


@pytest.fixture
def fake_jdeps(tmp_path):
    """
    Writes a shell script standing in for jdeps under tmp_path/jdk/bin.
    The script records its arguments (one per line) in tmp_path/args.txt.
    """
    if sys.platform == "win32":
        pytest.skip("fake jdeps is a POSIX shell script")

    def make(stdout: str = "", stderr: str = "", exit_code: int = 0, body: str = "") -> Path:
        bin_dir = tmp_path / "jdk" / "bin"
        bin_dir.mkdir(parents=True, exist_ok=True)
        script = bin_dir / "jdeps"

        lines = ["#!/bin/sh", f'printf "%s\\n" "$@" > "{tmp_path / "args.txt"}"']
        if stdout:
            lines += ["cat <<'__STDOUT__'", stdout, "__STDOUT__"]
        if stderr:
            lines += ["cat >&2 <<'__STDERR__'", stderr, "__STDERR__"]
        if body:
            lines.append(body)
        lines.append(f"exit {exit_code}")

        script.write_text("\n".join(lines) + "\n")
        script.chmod(stat.S_IRWXU)
        return script

    return make


@pytest.fixture
def recorded_args(tmp_path):
    def read():
        return (tmp_path / "args.txt").read_text().splitlines()

    return read
