"""
================================================================================
Table Accessor
================================================================================

Row lookups over grid tables rendered by the administration panel.
Cells are addressed by their `data-column` attribute.

================================================================================
"""

from __future__ import annotations

from typing import Any, List, Mapping

from playwright.async_api import Locator

from .locators import ElementNotFoundError


ROW_SELECTOR = "tbody tr"


class AmbiguousRowError(ElementNotFoundError):
    """Several rows match where exactly one is expected."""


def cell_selector(column: str) -> str:
    return f"[data-column='{column}']"


class TableAccessor:
    async def count_table_body_rows(self, table: Locator) -> int:
        return await table.locator(ROW_SELECTOR).count()

    async def get_rows_with_fields(self, table: Locator, fields: Mapping[str, Any]) -> List[Locator]:
        """
        Return every body row whose cells match all `fields`.

        Raises:
            ElementNotFoundError: No row matches
        """
        rows = table.locator(ROW_SELECTOR)
        matching: List[Locator] = []
        for index in range(await rows.count()):
            row = rows.nth(index)
            if await self._row_matches(row, fields):
                matching.append(row)

        if not matching:
            raise ElementNotFoundError(f"Could not find any row with fields: {dict(fields)}")
        return matching

    async def get_row_with_fields(self, table: Locator, fields: Mapping[str, Any]) -> Locator:
        """
        Return the only body row matching `fields`.

        Raises:
            ElementNotFoundError: No row matches
            AmbiguousRowError: More than one row matches
        """
        rows = await self.get_rows_with_fields(table, fields)
        if len(rows) != 1:
            raise AmbiguousRowError(f"Expected exactly one row with fields {dict(fields)}, found {len(rows)}")
        return rows[0]

    async def get_indexed_column(self, table: Locator, column: str) -> List[str]:
        rows = table.locator(ROW_SELECTOR)
        values = []
        for index in range(await rows.count()):
            cell = rows.nth(index).locator(cell_selector(column))
            if await cell.count():
                values.append((await cell.first.text_content() or "").strip())
        return values

    async def _row_matches(self, row: Locator, fields: Mapping[str, Any]) -> bool:
        for column, expected in fields.items():
            cell = row.locator(cell_selector(column))
            if not await cell.count():
                raise ElementNotFoundError(f'Column "{column}" does not exist in the table')
            text = (await cell.first.text_content() or "").strip()
            if text != str(expected):
                return False
        return True


__all__ = [
    "AmbiguousRowError",
    "TableAccessor",
]
