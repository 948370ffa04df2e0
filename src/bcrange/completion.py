"""Next-id suggestions for a declaration being typed.

An editor integration calls these helpers when the user has typed a bare
kind keyword (``codeunit``) at the top of a source file. The helpers decide
whether the cursor is at a declaration site and which id to offer.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from bcrange.analysis.models import Project
from bcrange.analysis.ops import RangeAnalyzer
from bcrange.parsing.kinds import DeclarationKind

MAX_KEYWORD_INDENT = 3
TAB_WIDTH = 4
MAX_LOOKBACK_LINES = 500

_KEYWORD_PATTERN = re.compile(r"^\s*([a-z]+)\s*$", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class IdSuggestion:
    """Outcome of a suggestion request. next_id is None when nothing is free."""

    next_id: int | None
    kind: DeclarationKind
    project_name: str | None
    shared: bool

    @property
    def message(self) -> str:
        if self.next_id is not None:
            scope = "shared range" if self.shared else f"project {self.project_name!r}"
            return f"Next available {self.kind.keyword} id in {scope}: {self.next_id}"
        if self.shared:
            return "All ids in the shared range are used"
        if self.project_name is not None:
            return f"All ids in {self.project_name!r} ranges are used"
        return "Could not determine the project for this file"

    def to_dict(self) -> dict[str, object]:
        return {
            "next_id": self.next_id,
            "kind": self.kind.value,
            "project": self.project_name,
            "shared": self.shared,
        }


def _indent_width(text: str) -> int:
    stripped = text.lstrip()
    leading = text[: len(text) - len(stripped)]
    return len(leading.replace("\t", " " * TAB_WIDTH))


def match_kind_keyword(text_before_cursor: str) -> DeclarationKind | None:
    """Return the kind if the text is only a kind keyword at shallow indentation."""
    if _indent_width(text_before_cursor) > MAX_KEYWORD_INDENT:
        return None
    m = _KEYWORD_PATTERN.match(text_before_cursor)
    if m is None:
        return None
    return DeclarationKind.from_keyword(m.group(1))


def brace_balance(line: str) -> int:
    """Opening minus closing braces, ignoring quoted strings and ``//`` comments."""
    balance = 0
    in_string = False
    for i, char in enumerate(line):
        if not in_string and line.startswith("//", i):
            break
        if char == "'":
            in_string = not in_string
        elif not in_string:
            if char == "{":
                balance += 1
            elif char == "}":
                balance -= 1
    return balance


def is_at_root_level(lines: Sequence[str], line_index: int) -> bool:
    """True if the braces of the preceding lines balance out."""
    start = max(0, line_index - MAX_LOOKBACK_LINES)
    return sum(brace_balance(line) for line in lines[start:line_index]) == 0


def find_project_for_path(projects: Sequence[Project], path: Path) -> Project | None:
    """Project whose root contains path; the deepest root wins."""
    best: Project | None = None
    best_depth = -1
    for project in projects:
        if project.root is None or not path.is_relative_to(project.root):
            continue
        depth = len(project.root.parts)
        if depth > best_depth:
            best, best_depth = project, depth
    return best


def suggest_next_id(
    projects: Sequence[Project],
    kind: DeclarationKind,
    path: Path | None,
    *,
    shared_mode: bool,
    analyzer: RangeAnalyzer | None = None,
) -> IdSuggestion:
    analyzer = analyzer or RangeAnalyzer()
    if shared_mode:
        next_id = analyzer.next_available_id_for_kind(projects, kind)
        return IdSuggestion(next_id=next_id, kind=kind, project_name=None, shared=True)

    project = find_project_for_path(projects, path) if path is not None else None
    if project is None:
        return IdSuggestion(next_id=None, kind=kind, project_name=None, shared=False)
    return IdSuggestion(
        next_id=analyzer.next_available_id(project),
        kind=kind,
        project_name=project.name,
        shared=False,
    )
