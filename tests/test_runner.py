import logging
import sys
from pathlib import Path

import pytest

from cmdassert.assertion import AssertError, assert_output
from cmdassert.config import CaseConfig, Expectation, SuiteConfig
from cmdassert.output import ProcessResult
from cmdassert.runner import CaseResult, SuiteRunner, apply_expectation

BIN_FIXTURE = Path(__file__).parent / "fixtures" / "bin_fixture.py"


def _case(name, expect=None, **env):
    return CaseConfig(
        name=name,
        command=[sys.executable, str(BIN_FIXTURE)],
        env=env,
        expect=expect or Expectation(),
    )


# --- apply_expectation ---


def test_apply_expectation_all_checks_pass():
    checks = assert_output(ProcessResult(0, b"hello\n", b"warn\n"))
    expect = Expectation(
        status="success",
        code=[0, 1],
        stdout="hello\n",
        stdout_contains="ell",
        stdout_matches="^h",
        stderr="warn\n",
        stderr_contains="war",
        stderr_matches="n$",
    )
    assert apply_expectation(checks, expect) is checks


def test_apply_expectation_empty_passes_anything():
    apply_expectation(assert_output(ProcessResult(None)), Expectation())


@pytest.mark.parametrize(
    "expect, message",
    [
        (Expectation(status="success"), "Unexpected failure"),
        (Expectation(status="interrupted"), "Unexpected completion"),
        (Expectation(code=0), "Unexpected return code"),
        (Expectation(stdout="nope"), "Unexpected stdout"),
        (Expectation(stdout_contains="zzz"), "Unexpected stdout"),
        (Expectation(stderr_matches="^x"), "Unexpected stderr"),
    ],
)
def test_apply_expectation_failures(expect, message):
    checks = assert_output(ProcessResult(3, b"out", b"err"))
    with pytest.raises(AssertError, match=message):
        apply_expectation(checks, expect)


def test_apply_expectation_failure_status():
    apply_expectation(assert_output(ProcessResult(3)), Expectation(status="failure"))
    with pytest.raises(AssertError, match="Unexpected success"):
        apply_expectation(assert_output(ProcessResult(0)), Expectation(status="failure"))


# --- SuiteRunner ---


def test_runner_reports_pass_and_fail():
    suite = SuiteConfig(
        name="demo",
        cases=[
            _case("ok", Expectation(status="success", stdout="hi\n"), stdout="hi"),
            _case("bad", Expectation(code=0), exit="2"),
        ],
    )
    results = SuiteRunner(suite).execute()

    assert [r.name for r in results] == ["ok", "bad"]
    assert results[0].passed is True
    assert results[0].message == ""
    assert results[1].passed is False
    assert results[1].message.startswith("Unexpected return code")
    assert "case=`bad`" in results[1].message
    assert all(r.duration_seconds >= 0 for r in results)


def test_runner_case_filter():
    suite = SuiteConfig(cases=[_case("a"), _case("b")])
    results = SuiteRunner(suite, case_filter="b").execute()
    assert [r.name for r in results] == ["b"]


def test_runner_unknown_case_filter_raises():
    suite = SuiteConfig(cases=[_case("a")])
    with pytest.raises(ValueError, match="No case named"):
        SuiteRunner(suite, case_filter="zzz").execute()


def test_runner_passes_stdin_and_cwd(tmp_path):
    case = CaseConfig(
        name="stdin",
        command=[
            sys.executable,
            "-c",
            "import os, sys; print(sys.stdin.read(), os.path.basename(os.getcwd()))",
        ],
        stdin="piped",
        cwd=str(tmp_path),
        expect=Expectation(stdout=f"piped {tmp_path.name}\n"),
    )
    results = SuiteRunner(SuiteConfig(cases=[case])).execute()
    assert results[0].passed, results[0].message


def test_runner_launch_error_is_a_failure(tmp_path, caplog):
    case = CaseConfig(name="missing", command=[str(tmp_path / "no-such-binary")])
    with caplog.at_level(logging.WARNING):
        results = SuiteRunner(SuiteConfig(cases=[case])).execute()
    assert results[0].passed is False
    assert "could not launch" in results[0].message
    assert "could not be launched" in caplog.text


def test_runner_launch_error_from_subprocess(mocker):
    mocker.patch("cmdassert.output.subprocess.run", side_effect=PermissionError("denied"))
    results = SuiteRunner(SuiteConfig(cases=[_case("perm")])).execute()
    assert results[0].passed is False
    assert "denied" in results[0].message


def test_case_result_to_dict():
    assert CaseResult("n", True, "", 1.5).to_dict() == {
        "name": "n",
        "passed": True,
        "message": "",
        "duration_seconds": 1.5,
    }
