"""Text helpers shared by the report commands.

Ids, spans and source locations are printed the same way by every command.
"""

from __future__ import annotations


def format_location(unit_id: str, line: int, *, max_len: int = 48) -> str:
    """``path:line`` with the path shortened from the left to fit max_len.

    Leading folders are replaced by ``...`` one at a time; the file name is
    always kept.

    Examples:
        ("src/Tab.al", 3) -> "src/Tab.al:3"
        ("ws/AppA/src/tables/sales/Customer.Table.al", 12)
            -> ".../sales/Customer.Table.al:12" (with a small max_len)
    """
    parts = unit_id.replace("\\", "/").split("/")
    suffix = f":{line}"
    shown = "/".join(parts)
    for cut in range(1, len(parts)):
        if len(shown) + len(suffix) <= max_len:
            break
        shown = "/".join(["...", *parts[cut:]])
    return shown + suffix


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """"1 id", "3 ids", "2 entries"."""
    word = singular if count == 1 else (plural or f"{singular}s")
    return f"{count} {word}"


def format_span(start: int, end: int) -> str:
    """Inclusive id span; a one-id span prints as the id alone."""
    return str(start) if start == end else f"{start}-{end}"


def format_names(names: list[str], *, max_shown: int = 3) -> str:
    """Join names for a one-line summary, collapsing the tail.

    Examples:
        ["AppA"] -> "AppA"
        ["AppA", "AppB", "AppC", "AppD"] -> "AppA, AppB, +2 more"
    """
    if len(names) <= max_shown:
        return ", ".join(names)
    head = max_shown - 1
    return ", ".join(names[:head]) + f", +{len(names) - head} more"
