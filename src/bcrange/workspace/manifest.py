"""App manifest (app.json) validation and range normalization.

A manifest carries the project name and either ``idRanges`` (a list) or the
legacy ``idRange`` (a single range). Both normalize to ``Manifest.id_ranges``;
``idRanges`` wins when both are present.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StrictStr,
    ValidationError,
    field_validator,
    model_validator,
)

from bcrange.analysis.models import IdRange
from bcrange.core.errors import ManifestError
from bcrange.core.logging import get_logger

log = get_logger("manifest")

NonEmptyStr = Annotated[StrictStr, Field(min_length=1)]


def _whole_number(value: Any) -> Any:
    """JSON numbers with no fractional part (50000 or 50000.0); no bools or strings."""
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ValueError("must be a number")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError("must be a whole number")
        return int(value)
    return value


PositiveInt = Annotated[int, BeforeValidator(_whole_number), Field(gt=0)]


class ManifestRange(BaseModel):
    """``{"from": ..., "to": ...}`` entry."""

    model_config = ConfigDict(populate_by_name=True)

    start: PositiveInt = Field(alias="from")
    end: PositiveInt = Field(alias="to")

    @model_validator(mode="after")
    def check_order(self) -> ManifestRange:
        if self.end < self.start:
            raise ValueError("'to' must be greater than or equal to 'from'")
        return self

    def to_range(self) -> IdRange:
        return IdRange(self.start, self.end)


class AppManifestSchema(BaseModel):
    """Fields of app.json this tool relies on. Unknown keys are ignored."""

    id: NonEmptyStr
    name: NonEmptyStr
    publisher: NonEmptyStr
    version: NonEmptyStr
    id_ranges: list[ManifestRange] | None = Field(default=None, alias="idRanges")
    id_range: ManifestRange | None = Field(default=None, alias="idRange")

    @field_validator("id_ranges", "id_range", mode="before")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        # Absent is fine; an explicit null is not
        if v is None:
            raise ValueError("must not be null")
        return v


@dataclass(frozen=True, slots=True)
class Manifest:
    """Normalized manifest."""

    id: str
    name: str
    publisher: str
    version: str
    id_ranges: tuple[IdRange, ...]


def _normalize(schema: AppManifestSchema) -> Manifest:
    if schema.id_ranges is not None:
        ranges = tuple(r.to_range() for r in schema.id_ranges)
    elif schema.id_range is not None:
        ranges = (schema.id_range.to_range(),)
    else:
        ranges = ()
    return Manifest(
        id=schema.id,
        name=schema.name,
        publisher=schema.publisher,
        version=schema.version,
        id_ranges=ranges,
    )


def validate_manifest(content: str, source: str = "<string>") -> Manifest:
    """Validate manifest text.

    Raises:
        ManifestError: If the text is not JSON or fails validation.
    """
    try:
        data: Any = json.loads(content.lstrip("\ufeff"))
    except json.JSONDecodeError as e:
        raise ManifestError.parse_error(source, str(e)) from e

    try:
        return _normalize(AppManifestSchema.model_validate(data))
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"]) or "<root>"
        raise ManifestError.invalid(source, field, err["msg"]) from e


def parse_manifest(content: str) -> Manifest | None:
    """Validate manifest text. Returns None when it is unusable.

    Never raises: callers filter out invalid projects and continue.
    """
    try:
        return validate_manifest(content)
    except ManifestError as e:
        log.debug("manifest_rejected", **e.log_fields())
        return None


def load_manifest(path: Path) -> Manifest:
    """Read and validate a manifest file.

    Raises:
        ManifestError: If the file cannot be read or decoded, or fails validation.
    """
    try:
        content = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestError.parse_error(str(path), str(e)) from e
    return validate_manifest(content, str(path))
