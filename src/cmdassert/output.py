"""Captured process results and their diagnostic formatting."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Sequence

logger = logging.getLogger(__name__)


def dump_buffer(buffer: bytes) -> str:
    """Render captured bytes as text, escaping anything that is not valid UTF-8."""
    return bytes(buffer).decode("utf-8", errors="backslashreplace")


@dataclass(frozen=True)
class ProcessResult:
    """Outcome of a finished process.

    Attributes:
        code: Exit code, or None when the process produced none (e.g. it was
            killed by a signal).
        stdout: Raw captured standard output.
        stderr: Raw captured standard error.
    """

    code: int | None
    stdout: bytes = b""
    stderr: bytes = b""

    @property
    def success(self) -> bool:
        return self.code == 0

    @classmethod
    def from_completed(cls, completed: subprocess.CompletedProcess) -> ProcessResult:
        """Build a result from ``subprocess.run`` output.

        A negative return code means the child was terminated by a signal; it is
        recorded as having no exit code.
        """
        code = completed.returncode
        return cls(
            code=code if code is not None and code >= 0 else None,
            stdout=_as_bytes(completed.stdout),
            stderr=_as_bytes(completed.stderr),
        )

    def ok(self, command: str | None = None, stdin: bytes | None = None) -> ProcessResult:
        """Return self if the process succeeded, else raise OutputError."""
        if self.success:
            return self
        raise OutputError(self, command=command, stdin=stdin)


def _as_bytes(data: bytes | str | None) -> bytes:
    if data is None:
        return b""
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def format_output(result: ProcessResult) -> str:
    """Format the code and both streams of ``result`` for a failure report."""
    code = "<interrupted>" if result.code is None else str(result.code)
    return (
        f"code={code}\n"
        f"stdout=```{dump_buffer(result.stdout)}```\n"
        f"stderr=```{dump_buffer(result.stderr)}```\n"
    )


class OutputError(Exception):
    """A command did not succeed when it was required to."""

    def __init__(
        self,
        result: ProcessResult,
        command: str | None = None,
        stdin: bytes | None = None,
    ):
        self.result = result
        self.command = command
        self.stdin = stdin
        super().__init__(self._render())

    def _render(self) -> str:
        lines = []
        if self.command is not None:
            lines.append(f"command=`{self.command}`")
        if self.stdin is not None:
            lines.append(f"stdin=```{dump_buffer(self.stdin)}```")
        return "\n".join(lines + [format_output(self.result)]).rstrip("\n")


def format_command(args: Sequence[str | Path]) -> str:
    return repr([str(a) for a in args])


def run_command(
    args: Sequence[str | Path],
    *,
    stdin: bytes | str | None = None,
    env: Mapping[str, str] | None = None,
    cwd: str | Path | None = None,
) -> ProcessResult:
    """Run ``args`` to completion and capture its output.

    Blocks until the process exits. ``env`` replaces the child environment
    entirely when given. Launch failures (missing executable, bad cwd)
    propagate as ``OSError``.
    """
    logger.debug(f"Running command: {format_command(args)}")
    completed = subprocess.run(
        [str(a) for a in args],
        input=_as_bytes(stdin) if stdin is not None else None,
        env=dict(env) if env is not None else None,
        cwd=cwd,
        capture_output=True,
        check=False,
    )
    result = ProcessResult.from_completed(completed)
    logger.debug(f"Command exited with code {result.code}")
    if result.stdout:
        logger.debug(f"stdout: {dump_buffer(result.stdout)}")
    if result.stderr:
        logger.debug(f"stderr: {dump_buffer(result.stderr)}")
    return result
