"""Declaration records produced by the scanner."""

from __future__ import annotations

from dataclasses import dataclass

from bcrange.parsing.kinds import DeclarationKind


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Where a record was declared. Used for navigation only."""

    unit_id: str
    line: int  # 1-based


@dataclass(frozen=True, slots=True)
class TableField:
    """A ``field(<id>; <name>; <type>)`` entry of a table or table extension."""

    id: int
    name: str
    data_type: str  # verbatim, trimmed
    location: SourceLocation


@dataclass(frozen=True, slots=True)
class EnumValue:
    """A ``value(<id>; <name>)`` entry of an enum or enum extension."""

    id: int  # ordinal, 0 is legal
    name: str
    location: SourceLocation


@dataclass(frozen=True, slots=True)
class Declaration:
    """One object-level declaration.

    ``fields`` is a tuple only for kinds that collect fields and ``values``
    only for kinds that collect enum values; both are ``None`` otherwise.
    """

    kind: DeclarationKind
    id: int
    name: str
    location: SourceLocation
    extends_name: str | None = None
    fields: tuple[TableField, ...] | None = None
    values: tuple[EnumValue, ...] | None = None

    @property
    def children(self) -> tuple[TableField, ...] | tuple[EnumValue, ...]:
        """Fields or values, whichever applies (empty when neither does)."""
        if self.fields is not None:
            return self.fields
        if self.values is not None:
            return self.values
        return ()

    def to_dict(self) -> dict[str, object]:
        """Serialize for JSON output."""
        data: dict[str, object] = {
            "kind": self.kind.value,
            "id": self.id,
            "name": self.name,
            "unit": self.location.unit_id,
            "line": self.location.line,
        }
        if self.extends_name is not None:
            data["extends"] = self.extends_name
        if self.fields is not None:
            data["fields"] = [
                {"id": f.id, "name": f.name, "type": f.data_type, "line": f.location.line}
                for f in self.fields
            ]
        if self.values is not None:
            data["values"] = [
                {"id": v.id, "name": v.name, "line": v.location.line} for v in self.values
            ]
        return data
