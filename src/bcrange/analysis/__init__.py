"""Analysis module - gaps, range merging and conflict detection."""

from bcrange.analysis.conflicts import (
    find_conflicts,
    find_field_conflicts,
    find_value_conflicts,
)
from bcrange.analysis.models import (
    ChildConflict,
    ChildOccurrence,
    Conflict,
    Gap,
    IdRange,
    Project,
    WorkspaceAnalysis,
)
from bcrange.analysis.ops import RangeAnalyzer
from bcrange.analysis.ranges import find_gaps, merge_ranges, next_available

__all__ = [
    "ChildConflict",
    "ChildOccurrence",
    "Conflict",
    "Gap",
    "IdRange",
    "Project",
    "RangeAnalyzer",
    "WorkspaceAnalysis",
    "find_conflicts",
    "find_field_conflicts",
    "find_gaps",
    "find_value_conflicts",
    "merge_ranges",
    "next_available",
]
