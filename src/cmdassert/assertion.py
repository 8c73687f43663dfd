"""Fluent assertions over a finished process."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Any, Mapping, Sequence

from cmdassert.coerce import CodeLike, OutputLike, into_code_predicate, into_output_predicate
from cmdassert.output import (
    ProcessResult,
    dump_buffer,
    format_command,
    format_output,
    run_command,
)
from cmdassert.predicates.base import Predicate

logger = logging.getLogger(__name__)


class AssertError(AssertionError):
    """A check on a process result failed.

    The message is the full report: what was expected, the explanation tree,
    the caller's context and the captured output.
    """

    def __init__(self, message: str, output: ProcessResult):
        self.output = output
        super().__init__(message)


class Assert:
    """Chainable checks on a ProcessResult.

    Every check returns the same ``Assert`` when it passes and raises
    ``AssertError`` when it does not, so a chain stops at the first failure::

        assert_command(["git", "status"]).success().stdout(text.contains("branch"))
    """

    def __init__(self, output: ProcessResult):
        self._output = output
        self._context: list[tuple[str, Any]] = []

    def append_context(self, name: str, context: Any) -> Assert:
        """Attach a labelled value that every later failure report includes."""
        self._context.append((name, context))
        return self

    def get_output(self) -> ProcessResult:
        return self._output

    def _fail(self, message: str) -> AssertError:
        logger.debug(f"Assertion failed: {message.splitlines()[0]}")
        return AssertError(f"{message}\n{self}", self._output)

    def success(self) -> Assert:
        """Ensure the command exited with code 0."""
        if not self._output.success:
            code = self._output.code
            actual = "<interrupted>" if code is None else str(code)
            raise self._fail(
                f"Unexpected failure.\ncode={actual}\n"
                f"stderr=```{dump_buffer(self._output.stderr)}```"
            )
        return self

    def failure(self) -> Assert:
        """Ensure the command did not succeed."""
        if self._output.success:
            raise self._fail("Unexpected success")
        return self

    def interrupted(self) -> Assert:
        """Ensure the command ended without an exit code."""
        if self._output.code is not None:
            raise self._fail("Unexpected completion")
        return self

    def code(self, pred: CodeLike) -> Assert:
        """Ensure the exit code matches ``pred``.

        Accepts a predicate, a single code, an iterable of codes or a callable
        (see ``into_code_predicate``). A process without an exit code always
        fails this check, whatever ``pred`` is.
        """
        return self._code(into_code_predicate(pred))

    def _code(self, pred: Predicate) -> Assert:
        actual = self._output.code
        if actual is None:
            raise self._fail("Command interrupted")
        case = pred.find_case(False, actual)
        if case is not None:
            raise self._fail(f"Unexpected return code, failed {case.tree()}")
        return self

    def stdout(self, pred: OutputLike) -> Assert:
        """Ensure stdout matches ``pred`` (see ``into_output_predicate``)."""
        return self._stream("stdout", self._output.stdout, into_output_predicate(pred))

    def stderr(self, pred: OutputLike) -> Assert:
        """Ensure stderr matches ``pred`` (see ``into_output_predicate``)."""
        return self._stream("stderr", self._output.stderr, into_output_predicate(pred))

    def _stream(self, name: str, actual: bytes, pred: Predicate) -> Assert:
        case = pred.find_case(False, actual)
        if case is not None:
            raise self._fail(f"Unexpected {name}, failed {case.tree()}")
        return self

    def __str__(self) -> str:
        lines = [f"{name}=`{context}`\n" for name, context in self._context]
        return "".join(lines) + format_output(self._output)

    def __repr__(self) -> str:
        return f"Assert(output={self._output!r})"


def assert_output(output: ProcessResult | subprocess.CompletedProcess) -> Assert:
    """Start a check chain on an already finished process."""
    if isinstance(output, subprocess.CompletedProcess):
        output = ProcessResult.from_completed(output)
    return Assert(output)


def assert_command(
    args: Sequence[str | Path],
    *,
    stdin: bytes | str | None = None,
    env: Mapping[str, str] | None = None,
    cwd: str | Path | None = None,
) -> Assert:
    """Run ``args`` and start a check chain on the result.

    The command line (and stdin, when given) is recorded as context so it
    shows up in any failure report.
    """
    result = run_command(args, stdin=stdin, env=env, cwd=cwd)
    checks = Assert(result).append_context("command", format_command(args))
    if stdin is not None:
        raw = stdin.encode("utf-8") if isinstance(stdin, str) else stdin
        checks.append_context("stdin", dump_buffer(raw))
    return checks
