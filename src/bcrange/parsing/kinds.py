"""Declaration kinds that carry a numeric object id.

The vocabulary is closed. Every kind is mapped to its traits in a single
table (``_TRAITS``); callers ask a kind what it supports instead of comparing
keyword strings.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ChildKind(str, Enum):
    """Which nested declarations a kind collects."""

    NONE = "none"
    FIELDS = "fields"  # field(<id>; <name>; <type>) inside a fields { } block
    VALUES = "values"  # value(<id>; <name>) anywhere inside the body


class DeclarationKind(str, Enum):
    """Object kinds with a numeric id. Values are the lower-case keywords."""

    TABLE = "table"
    TABLE_EXTENSION = "tableextension"
    PAGE = "page"
    PAGE_EXTENSION = "pageextension"
    REPORT = "report"
    REPORT_EXTENSION = "reportextension"
    CODEUNIT = "codeunit"
    QUERY = "query"
    XMLPORT = "xmlport"
    ENUM = "enum"
    ENUM_EXTENSION = "enumextension"
    PERMISSION_SET = "permissionset"
    PERMISSION_SET_EXTENSION = "permissionsetextension"

    @property
    def keyword(self) -> str:
        return self.value

    @property
    def children(self) -> ChildKind:
        return _TRAITS[self].children

    @property
    def is_extension(self) -> bool:
        """True when the kind takes an ``extends <name>`` clause."""
        return _TRAITS[self].is_extension

    @property
    def has_fields(self) -> bool:
        return self.children is ChildKind.FIELDS

    @property
    def has_values(self) -> bool:
        return self.children is ChildKind.VALUES

    @classmethod
    def from_keyword(cls, keyword: str) -> DeclarationKind | None:
        """Look up a kind by keyword, case-insensitively."""
        try:
            return cls(keyword.strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True, slots=True)
class KindTraits:
    children: ChildKind
    is_extension: bool


_TRAITS: dict[DeclarationKind, KindTraits] = {
    DeclarationKind.TABLE: KindTraits(ChildKind.FIELDS, False),
    DeclarationKind.TABLE_EXTENSION: KindTraits(ChildKind.FIELDS, True),
    DeclarationKind.PAGE: KindTraits(ChildKind.NONE, False),
    DeclarationKind.PAGE_EXTENSION: KindTraits(ChildKind.NONE, True),
    DeclarationKind.REPORT: KindTraits(ChildKind.NONE, False),
    DeclarationKind.REPORT_EXTENSION: KindTraits(ChildKind.NONE, True),
    DeclarationKind.CODEUNIT: KindTraits(ChildKind.NONE, False),
    DeclarationKind.QUERY: KindTraits(ChildKind.NONE, False),
    DeclarationKind.XMLPORT: KindTraits(ChildKind.NONE, False),
    DeclarationKind.ENUM: KindTraits(ChildKind.VALUES, False),
    DeclarationKind.ENUM_EXTENSION: KindTraits(ChildKind.VALUES, True),
    DeclarationKind.PERMISSION_SET: KindTraits(ChildKind.NONE, False),
    DeclarationKind.PERMISSION_SET_EXTENSION: KindTraits(ChildKind.NONE, True),
}

_missing = set(DeclarationKind) - set(_TRAITS)
if _missing:
    raise RuntimeError(f"Declaration kinds without traits: {sorted(k.value for k in _missing)}")

ALL_KINDS: tuple[DeclarationKind, ...] = tuple(DeclarationKind)
