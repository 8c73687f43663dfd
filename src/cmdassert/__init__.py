"""Fluent assertions for the exit status and output of subprocesses."""

from cmdassert.assertion import Assert, AssertError, assert_command, assert_output
from cmdassert.coerce import into_code_predicate, into_output_predicate
from cmdassert.output import OutputError, ProcessResult, dump_buffer, run_command

__all__ = [
    "Assert",
    "AssertError",
    "OutputError",
    "ProcessResult",
    "assert_command",
    "assert_output",
    "dump_buffer",
    "into_code_predicate",
    "into_output_predicate",
    "run_command",
]
