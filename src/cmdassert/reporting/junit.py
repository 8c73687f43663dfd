from __future__ import annotations

from pathlib import Path

from junitparser import Failure, JUnitXml, TestCase, TestSuite

from cmdassert.runner import CaseResult


def write_junit(junit_path: Path, suite_name: str, results: list[CaseResult]) -> Path:
    """Write junit.xml for one suite run, return path."""
    xml = JUnitXml()
    suite = TestSuite(suite_name)

    # Test cases: one per suite case
    for result in results:
        case = TestCase(result.name)
        case.classname = suite_name
        case.time = result.duration_seconds
        if not result.passed:
            failure = Failure(result.message.splitlines()[0] if result.message else "")
            failure.text = result.message
            case.result = failure
        suite.add_testcase(case)

    # Set time after add_testcase (add_testcase resets it via update_statistics)
    suite.time = sum(r.duration_seconds for r in results)

    # Use append (not +=) to preserve properties and time
    xml.append(suite)

    junit_path.parent.mkdir(parents=True, exist_ok=True)
    xml.write(str(junit_path), pretty=True)
    return junit_path
