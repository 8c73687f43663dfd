from __future__ import annotations

import time
from pathlib import Path

import typer

from cmdassert.config import ExpectedStatus

app = typer.Typer(name="cmdassert", help="Check the exit status and output of commands")


@app.command()
def run(
    suite: str = typer.Argument(help="Path to suite YAML file"),
    case: str | None = typer.Option(None, help="Run only this case"),
    junit: str | None = typer.Option(None, help="Write a JUnit XML report to this path"),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output to terminal"
    ),
    log_file: str | None = typer.Option(None, help="Also write debug output to this file"),
):
    """Run every case in a suite file."""
    from pydantic import ValidationError

    from cmdassert.config import load_suite
    from cmdassert.runner import SuiteRunner
    from cmdassert.verbose import setup_logger

    suite_path = Path(suite)
    if not suite_path.exists():
        typer.echo(f"Error: suite file not found: {suite}", err=True)
        raise typer.Exit(1)

    try:
        suite_config = load_suite(suite_path)
    except (ValidationError, ValueError) as e:
        typer.echo(f"Error: invalid suite {suite}:\n{e}", err=True)
        raise typer.Exit(1)

    # note: logger name must be unique per run to avoid handler collision
    logger = setup_logger(
        Path(log_file) if log_file else None,
        verbose=verbose,
        logger_name=f"cmdassert_run_{time.time_ns()}",
    )

    runner = SuiteRunner(suite_config, case_filter=case, logger=logger)
    try:
        results = runner.execute()
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    for result in results:
        if not result.passed:
            typer.echo(f"--- {result.name} ---\n{result.message}")

    passed = sum(1 for r in results if r.passed)
    typer.echo(f"{passed}/{len(results)} case(s) passed")

    if junit:
        from cmdassert.reporting.junit import write_junit

        junit_path = write_junit(Path(junit), suite_config.name, results)
        typer.echo(f"JUnit report: {junit_path}")

    if passed != len(results):
        raise typer.Exit(1)


@app.command()
def check(
    command: list[str] = typer.Argument(help="Command to run, after --"),
    status: ExpectedStatus | None = typer.Option(None, help="Expected termination status"),
    code: list[int] | None = typer.Option(None, help="Accepted exit code (repeatable)"),
    stdout: str | None = typer.Option(None, help="Exact expected stdout"),
    stderr: str | None = typer.Option(None, help="Exact expected stderr"),
    stdout_contains: str | None = typer.Option(None, help="Text stdout must contain"),
    stderr_contains: str | None = typer.Option(None, help="Text stderr must contain"),
):
    """Run one command and check its result."""
    from cmdassert.assertion import AssertError, assert_command
    from cmdassert.config import Expectation
    from cmdassert.runner import apply_expectation

    expect = Expectation(
        status=status,
        code=code or None,
        stdout=stdout,
        stderr=stderr,
        stdout_contains=stdout_contains,
        stderr_contains=stderr_contains,
    )
    try:
        apply_expectation(assert_command(command), expect)
    except AssertError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(1)
    except OSError as e:
        typer.echo(f"Error: could not launch {command[0]!r}: {e}", err=True)
        raise typer.Exit(1)
    typer.echo("ok")


@app.command()
def schema(
    out: str = typer.Option(
        "cmdassert.schema.json", help="Output path for the suite JSON Schema"
    ),
):
    """Generate JSON Schema for the suite YAML format."""
    from cmdassert.schema import write_json_schema

    out_path = Path(out)
    write_json_schema(out_path)
    typer.echo(f"Wrote schema: {out_path}")
