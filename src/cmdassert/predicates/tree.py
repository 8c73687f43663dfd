"""Render predicate explanation cases as indented trees."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cmdassert.predicates.base import Case

_BRANCH = "├── "
_LAST = "└── "
_PIPE = "│   "
_BLANK = "    "


def _case_label(case: Case) -> str:
    if case.predicate is None:
        return "<case>" if case.result else "<failed case>"
    return str(case.predicate)


def _render_lines(case: Case) -> list[str]:
    lines = [_case_label(case)]
    items: list[list[str]] = []
    for product in case.products:
        # Multi-line products (e.g. diffs) keep their own line breaks.
        items.append(str(product).splitlines() or [""])
    for child in case.children:
        items.append(_render_lines(child))

    for index, item_lines in enumerate(items):
        last = index == len(items) - 1
        head, rest = item_lines[0], item_lines[1:]
        lines.append((_LAST if last else _BRANCH) + head)
        indent = _BLANK if last else _PIPE
        lines.extend(indent + line for line in rest)
    return lines


def render_case(case: Case) -> str:
    """Render ``case`` and its products/children as a box-drawing tree.

    Products come first, in the order they were attached, followed by nested
    cases. The result has no trailing newline.
    """
    return "\n".join(_render_lines(case))
