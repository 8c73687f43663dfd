from __future__ import annotations

import logging
import time
from dataclasses import asdict, dataclass
from typing import Any

from cmdassert.assertion import Assert, AssertError, assert_command
from cmdassert.config import CaseConfig, ExpectedStatus, Expectation, SuiteConfig
from cmdassert.predicates import text


@dataclass
class CaseResult:
    name: str
    passed: bool
    message: str
    duration_seconds: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def apply_expectation(checks: Assert, expect: Expectation) -> Assert:
    """Chain every check named in ``expect`` onto ``checks``.

    Raises:
        AssertError: At the first check that does not hold.
    """
    if expect.status == ExpectedStatus.SUCCESS:
        checks = checks.success()
    elif expect.status == ExpectedStatus.FAILURE:
        checks = checks.failure()
    elif expect.status == ExpectedStatus.INTERRUPTED:
        checks = checks.interrupted()

    if expect.code is not None:
        checks = checks.code(expect.code)

    if expect.stdout is not None:
        checks = checks.stdout(expect.stdout)
    if expect.stdout_contains is not None:
        checks = checks.stdout(text.contains(expect.stdout_contains))
    if expect.stdout_matches is not None:
        checks = checks.stdout(text.is_match(expect.stdout_matches))

    if expect.stderr is not None:
        checks = checks.stderr(expect.stderr)
    if expect.stderr_contains is not None:
        checks = checks.stderr(text.contains(expect.stderr_contains))
    if expect.stderr_matches is not None:
        checks = checks.stderr(text.is_match(expect.stderr_matches))
    return checks


class SuiteRunner:
    """Runs the cases of a suite one after another."""

    def __init__(
        self,
        suite: SuiteConfig,
        case_filter: str | None = None,
        logger: logging.Logger | None = None,
    ):
        self.suite = suite
        self.case_filter = case_filter
        self.logger = logger or logging.getLogger(__name__)

    def execute(self) -> list[CaseResult]:
        cases = self.suite.cases
        if self.case_filter:
            cases = [c for c in cases if c.name == self.case_filter]
            if not cases:
                raise ValueError(f"No case named '{self.case_filter}' in suite")

        self.logger.debug(f"Running {len(cases)} case(s) from suite '{self.suite.name}'")
        results = []
        for case in cases:
            result = self._run_case(case)
            status = "PASS" if result.passed else "FAIL"
            self.logger.info(f"{status}  {case.name} ({result.duration_seconds:.2f}s)")
            results.append(result)

        passed = sum(1 for r in results if r.passed)
        self.logger.debug(f"Suite '{self.suite.name}' completed: {passed}/{len(results)} cases passed")
        return results

    def _run_case(self, case: CaseConfig) -> CaseResult:
        """Run a single case and evaluate its expectation."""
        self.logger.debug(f"Running case '{case.name}': {case.command}")
        start = time.monotonic()
        try:
            checks = assert_command(
                case.command,
                stdin=case.stdin,
                env=case.resolved_env(),
                cwd=case.cwd,
            ).append_context("case", case.name)
            apply_expectation(checks, case.expect)
        except AssertError as e:
            self.logger.debug(f"Case '{case.name}' failed:\n{e}")
            return CaseResult(
                name=case.name,
                passed=False,
                message=str(e),
                duration_seconds=time.monotonic() - start,
            )
        except OSError as e:
            self.logger.warning(f"Case '{case.name}' could not be launched: {e}")
            return CaseResult(
                name=case.name,
                passed=False,
                message=f"could not launch {case.command[0]!r}: {e}",
                duration_seconds=time.monotonic() - start,
            )

        return CaseResult(
            name=case.name,
            passed=True,
            message="",
            duration_seconds=time.monotonic() - start,
        )
