"""Gap computation and range merging over inclusive id ranges."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from bcrange.analysis.models import Gap, IdRange


def _range_gaps(id_range: IdRange, used_sorted: Sequence[int]) -> list[Gap]:
    gaps: list[Gap] = []
    cursor = id_range.start
    for used in used_sorted:
        if used < id_range.start:
            continue
        if used > id_range.end:
            break
        if used > cursor:
            gaps.append(Gap(cursor, used - 1))
        cursor = used + 1
    if cursor <= id_range.end:
        gaps.append(Gap(cursor, id_range.end))
    return gaps


def find_gaps(ranges: Sequence[IdRange], used_ids: Iterable[int]) -> list[Gap]:
    """Find maximal runs of unused ids inside each range.

    Ranges are processed independently in the order given, so overlapping
    ranges may report overlapping gaps. Used ids outside every range are
    ignored. No ranges gives an empty list ("unconfigured", not "full").
    """
    if not ranges:
        return []
    used_sorted = sorted(set(used_ids))
    gaps: list[Gap] = []
    for id_range in ranges:
        gaps.extend(_range_gaps(id_range, used_sorted))
    return gaps


def next_available(ranges: Sequence[IdRange], used_ids: Iterable[int]) -> int | None:
    """Start of the first gap in range input order, or None."""
    gaps = find_gaps(ranges, used_ids)
    if not gaps:
        return None
    return gaps[0].start


def merge_ranges(ranges: Iterable[IdRange]) -> list[IdRange]:
    """Merge overlapping or adjacent ranges into a sorted disjoint list."""
    ordered = sorted(ranges, key=lambda r: (r.start, r.end))
    if not ordered:
        return []

    merged: list[IdRange] = [ordered[0]]
    for current in ordered[1:]:
        last = merged[-1]
        if current.start <= last.end + 1:
            merged[-1] = IdRange(last.start, max(last.end, current.end))
        else:
            merged.append(current)
    return merged
