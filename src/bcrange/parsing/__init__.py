"""Parsing module - declaration scanning for AL source text."""

from bcrange.parsing.kinds import ALL_KINDS, ChildKind, DeclarationKind
from bcrange.parsing.models import Declaration, EnumValue, SourceLocation, TableField
from bcrange.parsing.scanner import INITIAL_STATE, ScanState, scan, step

__all__ = [
    "ALL_KINDS",
    "ChildKind",
    "Declaration",
    "DeclarationKind",
    "EnumValue",
    "INITIAL_STATE",
    "ScanState",
    "SourceLocation",
    "TableField",
    "scan",
    "step",
]
