"""Sort resolution shared by the list queries"""

from typing import Any, Mapping, Optional

from sqlalchemy import ColumnElement


def resolve_order_by(
    columns: Mapping[str, Any],
    sort_by: Optional[str],
    order: Optional[str],
    default: str = "createdAt",
) -> ColumnElement[Any]:
    """Map a client sort field onto a whitelisted column.

    Unknown fields fall back to ``default``; any order other than ``asc``
    sorts descending.
    """
    column = columns.get(sort_by or default, columns[default])
    if (order or "").lower() == "asc":
        return column.asc()
    return column.desc()
