"""Box-drawn terminal tables.

    ┌──────┬─────┐
    │ Name │ Pod │
    ├──────┼─────┤
    │ a    │ 1   │
    └──────┴─────┘

Row 0 of the data is the header. Column widths are computed from the raw
cell text of every row, so styling never shifts the borders. Width is the
number of code points; East Asian wide characters would misalign the
borders, which Kubernetes object names cannot contain.
"""
from __future__ import annotations
from typing import List, Optional, Sequence
import click

HIGHLIGHT_BG = 238

EMPTY = 'empty'
WIDTHS_COMPUTED = 'widths-computed'
RENDERING = 'rendering'
DONE = 'done'


def column_widths(rows: Sequence[Sequence[str]]) -> List[int]:
    widths: List[int] = []
    for row in rows:
        for i, cell in enumerate(row):
            if i >= len(widths):
                widths.append(0)
            widths[i] = max(widths[i], len(cell))
    return widths


def row_styles(body_count: int, alternate: bool) -> List[bool]:
    """Highlight flag per body row: plain first, then every other row highlighted."""
    return [alternate and i % 2 == 1 for i in range(body_count)]


class TableRenderer:
    """Renders one table, then refuses to be reused."""

    def __init__(self, rows: Sequence[Sequence[str]], alternate: bool = False):
        if not rows:
            raise ValueError('table needs at least a header row')
        self.rows = [list(r) for r in rows]
        self.alternate = alternate
        self.widths: Optional[List[int]] = None
        self.state = EMPTY

    def compute_widths(self) -> List[int]:
        if self.state != EMPTY:
            raise RuntimeError(f'column widths already computed (state={self.state})')
        self.widths = column_widths(self.rows)
        self.state = WIDTHS_COMPUTED
        return self.widths

    def _border(self, left: str, joint: str, right: str) -> str:
        return left + joint.join('─' * (w + 2) for w in self.widths) + right

    def _data_row(self, row: Sequence[str], highlight: bool) -> str:
        parts = ['│']
        for i, width in enumerate(self.widths):
            cell = row[i] if i < len(row) else ''
            padded = f' {cell.ljust(width)} '
            if highlight:
                padded = click.style(padded, bg=HIGHLIGHT_BG)
            parts.append(padded + '│')
        return ''.join(parts)

    def render_lines(self) -> List[str]:
        if self.state == EMPTY:
            self.compute_widths()
        if self.state != WIDTHS_COMPUTED:
            raise RuntimeError(f'table already rendered (state={self.state})')
        self.state = RENDERING
        header, body = self.rows[0], self.rows[1:]
        lines = [self._border('┌', '┬', '┐'), self._data_row(header, False)]
        if body:
            lines.append(self._border('├', '┼', '┤'))
            for row, highlight in zip(body, row_styles(len(body), self.alternate)):
                lines.append(self._data_row(row, highlight))
        lines.append(self._border('└', '┴', '┘'))
        self.state = DONE
        return lines

    def render(self) -> str:
        return '\n'.join(self.render_lines())


def render_table(rows: Sequence[Sequence[str]], alternate: bool = False) -> str:
    return TableRenderer(rows, alternate=alternate).render()
