from __future__ import annotations

import os
import re
import shlex
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from expandvars import expandvars
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ExpectedStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    INTERRUPTED = "interrupted"


class Expectation(BaseModel):
    """Checks applied to a case's process result, in field order."""

    model_config = ConfigDict(extra="forbid")
    status: ExpectedStatus | None = None
    code: int | list[int] | None = None
    stdout: str | None = None
    stdout_contains: str | None = None
    stdout_matches: str | None = None
    stderr: str | None = None
    stderr_contains: str | None = None
    stderr_matches: str | None = None

    @field_validator("stdout_matches", "stderr_matches")
    @classmethod
    def pattern_must_compile(cls, v: str | None) -> str | None:
        if v is not None:
            try:
                re.compile(v)
            except re.error as e:
                raise ValueError(f"invalid regular expression '{v}': {e}") from e
        return v


class CaseConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str
    command: list[str]
    env: dict[str, str] = {}
    inherit_env: bool = True
    cwd: str | None = None
    stdin: str | None = None
    expect: Expectation = Field(default_factory=Expectation)

    @field_validator("command", mode="before")
    @classmethod
    def split_command_string(cls, v: Any) -> Any:
        if isinstance(v, str):
            return shlex.split(v)
        return v

    @field_validator("command")
    @classmethod
    def command_must_not_be_empty(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("command must not be empty")
        return v

    @model_validator(mode="after")
    def validate_env_variables(self) -> "CaseConfig":
        """Reject ${VAR} references that are unset and have no default.

        Every missing variable of the case is reported in one ValueError.
        """
        missing: list[str] = []
        for key, value in self.env.items():
            try:
                expandvars(value, nounset=True)
            except Exception:
                # Variable is missing and has no default
                missing.append(f"  {key}={value}")

        if missing:
            details = "\n".join(missing)
            raise ValueError(
                f"Case '{self.name}' has missing environment variables:\n{details}"
            )

        return self

    def resolved_env(self) -> dict[str, str] | None:
        """Child environment for this case, or None to inherit unchanged."""
        if not self.env and self.inherit_env:
            return None
        base = dict(os.environ) if self.inherit_env else {}
        base.update({k: expandvars(v, nounset=True) for k, v in self.env.items()})
        return base


class SuiteConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str = "cmdassert"
    cases: list[CaseConfig]

    @field_validator("cases")
    @classmethod
    def case_names_must_be_valid(cls, v: list[CaseConfig]) -> list[CaseConfig]:
        if not v:
            raise ValueError("cases must not be empty")
        seen: set[str] = set()
        for case in v:
            if "," in case.name:
                raise ValueError(f"Case name '{case.name}' must not contain a comma")
            if case.name in seen:
                raise ValueError(f"Duplicate case name '{case.name}'")
            seen.add(case.name)
        return v


def load_suite(path: Path) -> SuiteConfig:
    """Load and validate a suite from a YAML file."""
    suite_dir = path.parent.resolve()

    with open(path) as f:
        raw = yaml.safe_load(f)

    if not isinstance(raw, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")

    suite = SuiteConfig(**raw)

    # Resolve relative cwd paths relative to suite file location
    for case in suite.cases:
        if case.cwd is not None:
            cwd_path = Path(case.cwd)
            if not cwd_path.is_absolute():
                case.cwd = str((suite_dir / cwd_path).resolve())

    return suite
