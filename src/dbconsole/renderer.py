"""Print query results as text tables."""

from __future__ import annotations

import sys
from typing import TextIO

from dbconsole.types import TabularResult

STYLES = ("tab", "grid")


def format_cell(value: str | None, max_width: int | None = None) -> str:
    """Format a cell for display; NULL becomes an empty field."""
    if value is None:
        return ""
    text = value.replace("\t", " ").replace("\n", " ")
    if max_width is not None and len(text) > max_width:
        return text[: max_width - 3] + "..."
    return text


class ResultRenderer:
    """Write a TabularResult to a stream and report its row count.

    The ``tab`` style writes the header and one line per row, cells joined
    by a tab. The ``grid`` style pads columns to a common width (capped at
    ``max_col_width``) and underlines the header.
    """

    def __init__(self, out: TextIO | None = None, style: str = "tab", max_col_width: int = 40) -> None:
        if style not in STYLES:
            raise ValueError(f"Unknown result style {style!r}")
        self.out = out if out is not None else sys.stdout
        self.style = style
        self.max_col_width = max_col_width

    def render(self, result: TabularResult) -> int:
        """Print result and return the number of rows."""
        if self.style == "grid":
            self._render_grid(result)
        else:
            self._render_tab(result)
        return len(result.rows)

    def _render_tab(self, result: TabularResult) -> None:
        print("\t".join(format_cell(c) for c in result.columns), file=self.out)
        for row in result.rows:
            print("\t".join(format_cell(v) for v in row), file=self.out)

    def _render_grid(self, result: TabularResult) -> None:
        # Calculate column widths
        columns = [format_cell(col) for col in result.columns]
        widths = [len(col) for col in columns]
        for row in result.rows:
            for i, value in enumerate(row):
                widths[i] = max(widths[i], len(format_cell(value)))
        widths = [min(w, self.max_col_width) for w in widths]

        header = " | ".join(
            col.ljust(w)[:w] for col, w in zip(columns, widths)
        )
        print(header, file=self.out)
        print("-" * len(header), file=self.out)

        for row in result.rows:
            values = [
                format_cell(value, w).ljust(w) for value, w in zip(row, widths)
            ]
            print(" | ".join(values), file=self.out)
