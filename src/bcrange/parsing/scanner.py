"""Line-oriented declaration scanner for AL source text.

The scan is a fold over lines. ``ScanState`` is an immutable value holding
everything carried from one line to the next (block comment state, the open
declaration, brace depth, fields-block tracking); ``step`` is the pure
transition for one line. ``scan`` threads the state through every line of a
unit and collects the finished declarations in header order.

The scanner never raises on malformed input: lines that do not match a
pattern only contribute to comment and brace tracking.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace

from bcrange.parsing.kinds import DeclarationKind
from bcrange.parsing.models import Declaration, EnumValue, SourceLocation, TableField

# Longest keywords first so "tableextension" is never read as "table".
_KIND_ALTERNATION = "|".join(
    sorted((kind.value for kind in DeclarationKind), key=len, reverse=True)
)
# Quoted name (group a) or bare identifier (group b)
_NAME = r'(?:"([^"]+)"|([A-Za-z_][A-Za-z0-9_]*))'

HEADER_PATTERN = re.compile(
    rf"^\s*({_KIND_ALTERNATION})\s+([0-9]+)\s+{_NAME}",
    re.IGNORECASE,
)
EXTENDS_PATTERN = re.compile(rf"\bextends\s+{_NAME}", re.IGNORECASE)
FIELD_PATTERN = re.compile(
    rf"^\s*field\s*\(\s*([0-9]+)\s*;\s*{_NAME}\s*;\s*([^)]+)\)",
    re.IGNORECASE,
)
VALUE_PATTERN = re.compile(
    rf"^\s*value\s*\(\s*([0-9]+)\s*;\s*{_NAME}\s*\)",
    re.IGNORECASE,
)
FIELDS_INLINE_PATTERN = re.compile(r"\bfields\s*\{", re.IGNORECASE)
FIELDS_TRAILING_PATTERN = re.compile(r"\bfields\s*$", re.IGNORECASE)

_INLINE_BLOCK_COMMENT = re.compile(r"/\*.*?\*/")
_LINE_SPLIT = re.compile(r"\r?\n")

BLOCK_OPEN = "/*"
BLOCK_CLOSE = "*/"
LINE_COMMENT = "//"


def strip_comments(line: str) -> tuple[str, bool]:
    """Remove comments from one line.

    Returns the code left on the line and whether an unterminated block
    comment starts on it. Closed ``/* ... */`` pairs go first, then the
    earlier of ``//`` and an unterminated ``/*`` cuts the rest of the line.
    A ``//`` in front of ``/*`` turns the would-be block open into line
    comment text.
    """
    result = line
    while True:
        stripped = _INLINE_BLOCK_COMMENT.sub("", result)
        if stripped == result:
            break
        result = stripped

    line_comment = result.find(LINE_COMMENT)
    block_open = result.find(BLOCK_OPEN)
    if block_open != -1 and (line_comment == -1 or block_open < line_comment):
        return result[:block_open], True
    if line_comment != -1:
        return result[:line_comment], False
    return result, False


def _name(match: re.Match[str], quoted_group: int) -> str:
    return match.group(quoted_group) or match.group(quoted_group + 1)


@dataclass(frozen=True, slots=True)
class OpenDeclaration:
    """A declaration whose scope has not closed yet."""

    kind: DeclarationKind
    id: int
    name: str
    location: SourceLocation
    extends_name: str | None = None
    fields: tuple[TableField, ...] = ()
    values: tuple[EnumValue, ...] = ()

    def with_field(self, field: TableField) -> OpenDeclaration:
        return replace(self, fields=(*self.fields, field))

    def with_value(self, value: EnumValue) -> OpenDeclaration:
        return replace(self, values=(*self.values, value))

    def close(self) -> Declaration:
        return Declaration(
            kind=self.kind,
            id=self.id,
            name=self.name,
            location=self.location,
            extends_name=self.extends_name,
            fields=self.fields if self.kind.has_fields else None,
            values=self.values if self.kind.has_values else None,
        )


@dataclass(frozen=True, slots=True)
class ScanState:
    """State carried between lines."""

    in_block_comment: bool = False
    current: OpenDeclaration | None = None
    depth: int = 0
    in_fields: bool = False
    fields_depth: int = 0
    expecting_fields_brace: bool = False


INITIAL_STATE = ScanState()


def match_header(code: str, line_no: int, unit_id: str) -> OpenDeclaration | None:
    """Match a declaration header on a comment-stripped line."""
    match = HEADER_PATTERN.match(code)
    if match is None:
        return None
    kind = DeclarationKind(match.group(1).lower())
    extends_name: str | None = None
    if kind.is_extension:
        # Search after the header so a quoted name containing "extends" is skipped
        extends = EXTENDS_PATTERN.search(code, match.end())
        if extends is not None:
            extends_name = _name(extends, 1)
    return OpenDeclaration(
        kind=kind,
        id=int(match.group(2)),
        name=_name(match, 3),
        location=SourceLocation(unit_id, line_no),
        extends_name=extends_name,
    )


def match_field(code: str, line_no: int, unit_id: str) -> TableField | None:
    match = FIELD_PATTERN.match(code)
    if match is None:
        return None
    return TableField(
        id=int(match.group(1)),
        name=_name(match, 2),
        data_type=match.group(4).strip(),
        location=SourceLocation(unit_id, line_no),
    )


def match_value(code: str, line_no: int, unit_id: str) -> EnumValue | None:
    match = VALUE_PATTERN.match(code)
    if match is None:
        return None
    return EnumValue(
        id=int(match.group(1)),
        name=_name(match, 2),
        location=SourceLocation(unit_id, line_no),
    )


def step(
    state: ScanState, line: str, line_no: int, unit_id: str
) -> tuple[ScanState, list[Declaration]]:
    """Advance the scan by one line.

    Returns the next state and the declarations finished on this line (a
    header finishes the previous declaration; a closing brace finishes the
    current one, so at most two).
    """
    in_block_comment = state.in_block_comment
    if in_block_comment:
        close_at = line.find(BLOCK_CLOSE)
        if close_at == -1:
            return state, []
        line = line[close_at + len(BLOCK_CLOSE) :]
        in_block_comment = False

    code, opens_block = strip_comments(line)
    if opens_block:
        in_block_comment = True

    finished: list[Declaration] = []
    current = state.current
    depth = state.depth
    in_fields = state.in_fields
    fields_depth = state.fields_depth
    expecting = state.expecting_fields_brace

    header = match_header(code, line_no, unit_id)
    if header is not None:
        if current is not None:
            finished.append(current.close())
        current = header
        depth = 0
        in_fields = False
        expecting = False

    opens = code.count("{")
    closes = code.count("}")

    if expecting and opens > 0:
        in_fields = True
        fields_depth = depth + 1
        expecting = False

    depth += opens - closes

    if current is not None and current.kind.has_fields and not in_fields:
        if FIELDS_INLINE_PATTERN.search(code):
            in_fields = True
            fields_depth = depth
        elif FIELDS_TRAILING_PATTERN.search(code):
            expecting = True

    if current is not None and in_fields and current.kind.has_fields:
        field = match_field(code, line_no, unit_id)
        if field is not None:
            current = current.with_field(field)

    if current is not None and current.kind.has_values and depth > 0:
        value = match_value(code, line_no, unit_id)
        if value is not None:
            current = current.with_value(value)

    if in_fields and depth < fields_depth:
        in_fields = False

    if current is not None and depth <= 0 and closes > 0:
        finished.append(current.close())
        current = None
        depth = 0
        in_fields = False
        expecting = False

    next_state = ScanState(
        in_block_comment=in_block_comment,
        current=current,
        depth=depth,
        in_fields=in_fields,
        fields_depth=fields_depth,
        expecting_fields_brace=expecting,
    )
    return next_state, finished


def finish(state: ScanState) -> list[Declaration]:
    """Flush a declaration still open at end of text."""
    if state.current is None:
        return []
    return [state.current.close()]


def split_lines(text: str) -> list[str]:
    """Split on LF or CRLF so both give the same line numbers."""
    return _LINE_SPLIT.split(text)


def scan(text: str, unit_id: str) -> list[Declaration]:
    """Extract every declaration from one source unit, in header order.

    Args:
        text: Raw source text
        unit_id: Opaque unit identifier stamped on every SourceLocation

    Returns:
        Declarations with their fields/values attached.
    """
    state = INITIAL_STATE
    declarations: list[Declaration] = []
    for line_no, line in enumerate(split_lines(text), start=1):
        state, finished = step(state, line, line_no, unit_id)
        declarations.extend(finished)
    declarations.extend(finish(state))
    return declarations
