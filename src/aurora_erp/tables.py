# Aurora ERP - Business management dashboard for SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Searchable, paginated record tables.

A table is described by a list of columns, each either:
- `FieldColumn`: shows one attribute of the record as text,
- `ComputedColumn`: shows the result of a function of the whole record.

Rows may be dataclass instances or mappings. Search matches
case-insensitively against every top-level field value of a row, whether
or not that field is displayed.
"""

import math
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, fields, is_dataclass
from typing import Any, Union

import pandas as pd

DEFAULT_ITEMS_PER_PAGE = 5


@dataclass(frozen=True)
class FieldColumn:
    header: str
    field: str


@dataclass(frozen=True)
class ComputedColumn:
    header: str
    compute: Callable[[Any], Any]


Column = Union[FieldColumn, ComputedColumn]


def row_values(row: Any) -> dict[str, Any]:
    """Top-level field values of a dataclass record or mapping."""
    if is_dataclass(row) and not isinstance(row, type):
        return {f.name: getattr(row, f.name) for f in fields(row)}
    if isinstance(row, Mapping):
        return dict(row)
    raise TypeError(f"Unsupported row type: {type(row).__name__}")


def search_rows(rows: Sequence[Any], term: str) -> list[Any]:
    if not term:
        return list(rows)
    needle = term.lower()
    return [
        row
        for row in rows
        if any(needle in str(v).lower() for v in row_values(row).values())
    ]


@dataclass(frozen=True)
class Page:
    """
    One page of rows.

    ``number`` is 1-based and already clamped to ``[1, total_pages]``
    (``total_pages`` is 0 for an empty table, in which case ``number`` is 1).
    """

    rows: list[Any]
    number: int
    total_pages: int
    total_rows: int

    @property
    def has_previous(self) -> bool:
        return self.number > 1

    @property
    def has_next(self) -> bool:
        return self.number < self.total_pages


def paginate(rows: Sequence[Any], page: int = 1, per_page: int = DEFAULT_ITEMS_PER_PAGE) -> Page:
    if per_page <= 0:
        raise ValueError("per_page must be positive.")
    total_pages = math.ceil(len(rows) / per_page)
    number = max(1, min(page, total_pages))
    start = (number - 1) * per_page
    return Page(
        rows=list(rows[start : start + per_page]),
        number=number,
        total_pages=total_pages,
        total_rows=len(rows),
    )


def _cell(column: Column, row: Any) -> Any:
    if isinstance(column, FieldColumn):
        return str(row_values(row).get(column.field))
    if isinstance(column, ComputedColumn):
        return column.compute(row)
    raise TypeError(f"Unsupported column type: {type(column).__name__}")


def render_table(columns: Sequence[Column], rows: Sequence[Any]) -> pd.DataFrame:
    """Build a display DataFrame with one column per descriptor, in order."""
    headers = [c.header for c in columns]
    return pd.DataFrame(
        [[_cell(c, row) for c in columns] for row in rows], columns=headers
    )
