from __future__ import annotations

from typing import Any, Dict, Iterable


# PUBLIC_INTERFACE
def pagination_envelope(items: Iterable[Any], total: int, limit: int, offset: int) -> Dict[str, Any]:
    """
    Build the standard pagination envelope for list endpoints.

    Args:
        items: The items of the current page (materialized into a list).
        total: Number of items matching the query, ignoring pagination.
        limit: The limit used for pagination.
        offset: The offset used for pagination.

    Returns:
        Dict with keys: items, total, limit, offset.
    """
    return {
        "items": list(items),
        "total": int(total),
        "limit": max(int(limit), 0),
        "offset": max(int(offset), 0),
    }
