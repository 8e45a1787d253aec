from pathlib import Path

import pytest

from jdeps_check.analysis import Goal, JDKInternalsCheck
from jdeps_check.config import JDepsConfig
from jdeps_check.core import Artifact, Verdict
from jdeps_check.errors import (
    ExecutableResolutionError,
    JDepsExecutionError,
    OffendingPackagesError,
)

OFFENDING_OUTPUT = "\n".join([
    "classes -> java.base",
    "   <unnamed> (classes)",
    "      -> java.io                                            ",
    "      -> sun.misc                                           JDK internal API (java.base)",
    "      -> sun.reflect                                        JDK internal API (jdk.unsupported)",
])

CLEAN_OUTPUT = "\n".join([
    "classes -> java.base",
    "      -> java.io                                            java.base",
])


@pytest.fixture
def project(tmp_path):
    (tmp_path / "target" / "classes").mkdir(parents=True)
    (tmp_path / "target" / "test-classes").mkdir(parents=True)
    return tmp_path


def make_config(project, jdeps, **kwargs):
    return JDepsConfig(
        classes_directory=project / "target" / "classes",
        test_classes_directory=project / "target" / "test-classes",
        toolchain=str(jdeps),
        **kwargs,
    )


# ----- decision -----

def test_offending_packages_fail_by_default():
    verdict = Verdict({"sun.misc": "JDK internal API (java.base)"}, {})
    with pytest.raises(OffendingPackagesError) as excinfo:
        JDKInternalsCheck.decide(verdict)
    assert excinfo.value.verdict is verdict
    assert verdict.failed


def test_offending_packages_only_warn_when_allowed(log_records):
    verdict = Verdict({"sun.misc": "JDK internal API (java.base)"}, {}, fail_on_warning=False)
    assert JDKInternalsCheck.decide(verdict) is verdict
    assert not verdict.failed
    assert any(level == "WARNING" and "sun.misc -> JDK internal API" in msg for level, msg in log_records)


def test_no_offending_packages_pass():
    verdict = Verdict({}, {"java.io": "compact1"})
    assert JDKInternalsCheck.decide(verdict) is verdict
    assert not verdict.failed


def test_report_lists_every_package_in_order():
    verdict = Verdict({"sun.misc": "JDK internal API (java.base)", "sun.reflect": "JDK removed internal API"}, {})
    lines = verdict.offending_report().splitlines()
    assert lines == [
        "Found offending packages:",
        " sun.misc -> JDK internal API (java.base)",
        " sun.reflect -> JDK removed internal API",
    ]


def test_non_zero_exit_code_is_a_failed_verdict():
    assert Verdict({}, {}, fail_on_warning=False, exit_code=1).failed


# ----- execute -----

def test_nothing_to_analyze(tmp_path, log_records):
    config = JDepsConfig(classes_directory=tmp_path / "missing", toolchain=str(tmp_path / "nope"))
    assert JDKInternalsCheck(config).execute() is None
    assert ("DEBUG", "No classes to analyze") in log_records


def test_missing_executable(project):
    config = make_config(project, project / "no-jdk" / "jdeps")
    with pytest.raises(ExecutableResolutionError, match="Unable to find jdeps command"):
        JDKInternalsCheck(config, env={}).execute()


def test_offending_packages_fail_the_check(project, fake_jdeps):
    jdeps = fake_jdeps(stdout=OFFENDING_OUTPUT)
    with pytest.raises(OffendingPackagesError) as excinfo:
        JDKInternalsCheck(make_config(project, jdeps)).execute()

    message = str(excinfo.value)
    assert message.startswith("Found offending packages:")
    assert " sun.misc -> JDK internal API (java.base)" in message
    assert " sun.reflect -> JDK internal API (jdk.unsupported)" in message


def test_offending_packages_allowed(project, fake_jdeps):
    jdeps = fake_jdeps(stdout=OFFENDING_OUTPUT)
    verdict = JDKInternalsCheck(make_config(project, jdeps, fail_on_warning=False)).execute()
    assert list(verdict.offending_packages) == ["sun.misc", "sun.reflect"]
    assert not verdict.failed


def test_clean_run(project, fake_jdeps):
    jdeps = fake_jdeps(stdout=CLEAN_OUTPUT)
    verdict = JDKInternalsCheck(make_config(project, jdeps)).execute()
    assert not verdict.has_offending_packages
    assert dict(verdict.profiles) == {"java.io": "java.base"}
    assert verdict.output == tuple(CLEAN_OUTPUT.splitlines())


def test_non_zero_exit_fails_even_when_warnings_allowed(project, fake_jdeps):
    jdeps = fake_jdeps(stdout=CLEAN_OUTPUT, stderr="boom", exit_code=1)
    with pytest.raises(JDepsExecutionError):
        JDKInternalsCheck(make_config(project, jdeps, fail_on_warning=False)).execute()


def test_command_line_sent_to_jdeps(project, fake_jdeps, recorded_args):
    jdeps = fake_jdeps(stdout=CLEAN_OUTPUT)
    lib = project / "lib"
    config = make_config(
        project,
        jdeps,
        classpath=(lib / "a.jar", lib / "b.jar"),
        include_classpath=False,
        artifacts=(Artifact("org.acme", "b", lib / "b.jar", "1.0"),),
        dependencies_to_analyze_includes=("org.acme:*",),
        jdkinternals=True,
    )
    JDKInternalsCheck(config).execute()

    assert recorded_args() == [
        "-cp", str(lib / "a.jar"),
        "-jdkinternals",
        str(project / "target" / "classes"),
        str(lib / "b.jar"),
    ]


def test_test_goal_uses_test_classes(project, fake_jdeps, recorded_args):
    jdeps = fake_jdeps(stdout=OFFENDING_OUTPUT)
    lib = project / "lib"
    config = make_config(
        project,
        jdeps,
        classpath=(lib / "main.jar",),
        test_classpath=(lib / "junit.jar",),
        fail_on_warning=True,
        test_fail_on_warning=False,
    )
    check = JDKInternalsCheck(config, Goal.TEST)
    verdict = check.execute()

    assert verdict.has_offending_packages and not verdict.failed
    assert recorded_args() == [str(project / "target" / "test-classes"), str(lib / "junit.jar")]


def test_process_runs_in_output_directory(project, fake_jdeps):
    jdeps = fake_jdeps(body="pwd")
    out = project / "target"
    verdict = JDKInternalsCheck(make_config(project, jdeps, output_directory=out)).execute()
    assert verdict.output[-1] == str(out.resolve())
