"""
Sort and selection rules for the applications table.

The dashboard keeps this state in query strings and form fields, so
everything here is a pure function over plain values.
"""
from __future__ import annotations

from typing import Iterable, List, Tuple

from ..schemas import DEFAULT_SORT_BY, DEFAULT_SORT_ORDER, SORT_FIELDS

COLUMN_LABELS = {
    "jobTitle": "Job Title",
    "companyName": "Company",
    "dateApplied": "Date Applied",
    "applicationStatus": "Status",
}


def current_sort(sort_by: str | None, sort_order: str | None) -> Tuple[str, str]:
    """Normalize whatever came in on the query string to a valid (column, direction)."""
    if sort_by not in SORT_FIELDS:
        return DEFAULT_SORT_BY, DEFAULT_SORT_ORDER
    return sort_by, sort_order if sort_order in ("asc", "desc") else DEFAULT_SORT_ORDER


def next_sort(sort_by: str, sort_order: str, column: str) -> Tuple[str, str]:
    """
    Header click: the same column toggles direction, a different column
    starts ascending.
    """
    if column == sort_by:
        return column, "desc" if sort_order == "asc" else "asc"
    return column, "asc"


def sort_indicator(sort_by: str, sort_order: str, column: str) -> str:
    if column != sort_by:
        return "↕"
    return "↑" if sort_order == "asc" else "↓"


def select_all(row_ids: Iterable[int], checked: bool) -> List[int]:
    """Select-all covers exactly the rows currently loaded."""
    return list(row_ids) if checked else []


def select_row(selected: List[int], row_id: int, checked: bool) -> List[int]:
    if checked:
        return selected if row_id in selected else selected + [row_id]
    return [i for i in selected if i != row_id]


def all_selected(selected: Iterable[int], row_ids: Iterable[int]) -> bool:
    row_ids = list(row_ids)
    return bool(row_ids) and set(row_ids) <= set(selected)
