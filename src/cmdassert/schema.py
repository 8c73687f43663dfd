"""Generate JSON Schema for the suite YAML format."""

from __future__ import annotations

import json
import re
from pathlib import Path

from cmdassert.config import SuiteConfig

_DEF_REF = re.compile(r'"\$ref": "#/\$defs/([^"]+)"')


def _dependency_order(defs: dict[str, dict]) -> dict[str, dict]:
    """Reorder ``$defs`` so every definition follows the ones it references."""
    ordered: dict[str, dict] = {}
    pending: set[str] = set()

    def place(name: str) -> None:
        if name in ordered or name in pending or name not in defs:
            return
        pending.add(name)
        for dep in _DEF_REF.findall(json.dumps(defs[name])):
            place(dep)
        ordered[name] = defs[name]

    for name in defs:
        place(name)
    return ordered


def generate_json_schema() -> dict:
    schema = SuiteConfig.model_json_schema()
    schema["title"] = "cmdassert suite"
    if "$defs" in schema:
        schema["$defs"] = _dependency_order(schema["$defs"])
    return schema


def write_json_schema(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(generate_json_schema(), indent=2) + "\n")
