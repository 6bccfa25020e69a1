"""
Query-string construction for endpoint operations.

Parameters are appended in the order given: the first with ``?``, the rest
with ``&``. ``None`` and ``False`` values are skipped, ``True`` produces a bare
flag (``?minimal_response``).
"""

from datetime import date, datetime
from typing import Any, Iterable, List, Optional, Sequence, Tuple, Union
from urllib.parse import quote

# Kept literal in values so timestamps and entity lists stay readable
_SAFE_CHARS = ":,"

Timestamp = Union[str, datetime, date]


def format_value(value: Any) -> str:
    """Render a query or path value, percent-encoding unsafe characters."""
    if isinstance(value, (datetime, date)):
        value = value.isoformat()
    elif isinstance(value, (list, tuple)):
        value = ",".join(str(v) for v in value)
    return quote(str(value), safe=_SAFE_CHARS)


def build_query(params: Iterable[Tuple[str, Any]]) -> Optional[str]:
    """
    Builds a query string from ordered ``(name, value)`` pairs.

    Args:
        params: Pairs in the order they must appear.

    Returns:
        The query string starting with ``?``, or None when nothing was added.
    """
    parts: List[str] = []
    seen = set()
    for name, value in params:
        if value is None or value is False or name in seen:
            continue
        seen.add(name)
        if value is True:
            parts.append(name)
        else:
            parts.append(f"{name}={format_value(value)}")
    if not parts:
        return None
    return "?" + "&".join(parts)


def join_ids(entity_ids: Union[str, Sequence[str], None]) -> Optional[str]:
    """Comma-join one or more entity ids; None or empty gives None."""
    if entity_ids is None:
        return None
    if isinstance(entity_ids, str):
        return entity_ids or None
    ids = [e for e in entity_ids if e]
    return ",".join(ids) if ids else None
