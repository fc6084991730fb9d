"""Layer 4 — Excel rendering adapter.

Renders a DocumentTree into an .xlsx workbook: one worksheet per page, with
frames and headings above the table and notes below it. Only the tree is
read here; nothing in this module knows about quotes or costs.
"""

from __future__ import annotations

import io
import re
from pathlib import Path
from typing import Optional

import openpyxl
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from quote_printer.report.document import (
    Cell,
    Color,
    DocumentTree,
    HAlign,
    Page,
    Paragraph,
    Row,
    Table,
    TextStyle,
)

# Layout constants
FIRST_ROW = 1
CM_TO_WIDTH = 4.6  # Excel column width units per cm (Calibri 11 metrics)
CM_PER_INCH = 2.54
LINE_HEIGHT = 15
TABLE_FONT_SIZE = 9
SHEET_TITLE_LIMIT = 31

_INVALID_SHEET_CHARS = re.compile(r'[\[\]:*?/\\]')

DEFAULT_BORDER = Color(0, 0, 0)


def _fill(color: Optional[Color]) -> Optional[PatternFill]:
    if color is None:
        return None
    return PatternFill(start_color=color.hex, end_color=color.hex, fill_type='solid')


def _side(width: float, color: Color) -> Side:
    style = 'thin' if width < 0.5 else 'medium' if width < 1.5 else 'thick'
    return Side(style=style, color=color.hex)


def _font(runs, family: str, bold: bool = False, size: Optional[int] = None) -> Font:
    styles = {r.style for r in runs}
    return Font(
        name=family or None,
        size=size,
        bold=bold or TextStyle.BOLD in styles or TextStyle.TITLE in styles,
        underline='single' if TextStyle.UNDERLINE in styles else None,
    )


class XlsxRenderer:
    """Renderer that turns a DocumentTree into .xlsx bytes."""

    def __init__(self, sheet_title_limit: int = SHEET_TITLE_LIMIT):
        self.sheet_title_limit = sheet_title_limit

    def render(self, tree: DocumentTree) -> bytes:
        wb = openpyxl.Workbook()
        wb.remove(wb.active)
        wb.properties.title = tree.title
        wb.properties.subject = tree.subject
        wb.properties.creator = tree.author

        used_titles: set[str] = set()
        for page in tree.pages:
            ws = wb.create_sheet(title=self._sheet_title(page.name, used_titles))
            self._write_page(ws, page, tree.font_family)

        buffer = io.BytesIO()
        wb.save(buffer)
        return buffer.getvalue()

    def _sheet_title(self, name: str, used: set[str]) -> str:
        base = _INVALID_SHEET_CHARS.sub("_", name).strip("'") or "Page"
        base = base[:self.sheet_title_limit]
        title = base
        n = 2
        while title.lower() in used:
            suffix = f" ({n})"
            title = base[:self.sheet_title_limit - len(suffix)] + suffix
            n += 1
        used.add(title.lower())
        return title

    def _write_page(self, ws, page: Page, family: str) -> None:
        width = len(page.table.columns) if page.table else 1
        row = FIRST_ROW

        for frame in page.frames:
            for para in frame.paragraphs:
                row = self._write_paragraph(ws, row, para, width, family)
            row += 1

        for para in page.headings:
            row = self._write_heading(ws, row, para, width, family)
        row += 1

        if page.table is not None:
            row = self._write_table(ws, row, page.table, family)

        for para in page.notes:
            row += max(1, round(para.space_before_cm))
            row = self._write_paragraph(ws, row, para, width, family)

        # --- Page setup ---
        if page.footer:
            ws.oddFooter.center.text = page.footer
        setup = page.setup
        for attr, value in [("top", setup.top_margin_cm), ("bottom", setup.bottom_margin_cm),
                            ("left", setup.left_margin_cm), ("right", setup.right_margin_cm)]:
            if value is not None:
                setattr(ws.page_margins, attr, value / CM_PER_INCH)

    def _write_paragraph(self, ws, row: int, para: Paragraph, width: int, family: str) -> int:
        text = para.text
        cell = ws.cell(row=row, column=1)
        cell.value = text.rstrip("\n") if para.border_color is None else text
        cell.font = _font(para.runs, family)
        cell.alignment = Alignment(horizontal=para.align.value, vertical='top', wrap_text=True)
        fill = _fill(para.shading)
        if fill is not None:
            cell.fill = fill

        lines = max(1, text.count("\n") + (0 if text.endswith("\n") else 1))
        if lines > 1:
            ws.row_dimensions[row].height = LINE_HEIGHT * lines
        if width > 1:
            ws.merge_cells(start_row=row, start_column=1, end_row=row, end_column=width)

        if para.border_color is not None and para.border_width > 0:
            side = _side(para.border_width, para.border_color)
            for col in range(1, width + 1):
                ws.cell(row=row, column=col).border = Border(
                    top=side, bottom=side,
                    left=side if col == 1 else None,
                    right=side if col == width else None,
                )
        return row + 1

    def _write_heading(self, ws, row: int, para: Paragraph, width: int, family: str) -> int:
        """Text before a tab goes left; text after it is right-aligned in the last column."""
        left_runs, right_runs = [], []
        target = left_runs
        for run in para.runs:
            if run.text == "\t":
                target = right_runs
                continue
            target.append(run)

        cell = ws.cell(row=row, column=1)
        cell.value = "".join(r.text for r in left_runs)
        cell.font = _font(left_runs, family)
        if right_runs:
            right = ws.cell(row=row, column=width)
            right.value = "".join(r.text for r in right_runs)
            right.font = _font(right_runs, family)
            right.alignment = Alignment(horizontal='right')
        return row + 1

    def _write_table(self, ws, start_row: int, table: Table, family: str) -> int:
        border_color = table.border_color or DEFAULT_BORDER
        thin = _side(table.border_width, border_color)
        sides: dict[tuple[int, int], dict[str, Optional[Side]]] = {}

        for col_idx, column in enumerate(table.columns, start=1):
            ws.column_dimensions[get_column_letter(col_idx)].width = column.width_cm * CM_TO_WIDTH

        merges = []
        for r_idx, trow in enumerate(table.rows):
            excel_row = start_row + r_idx
            for c_idx, tcell in enumerate(trow.cells):
                excel_col = 1 + c_idx
                visible = trow.borders_visible and tcell.borders_visible
                sides[(excel_row, excel_col)] = dict.fromkeys(
                    ("left", "right", "top", "bottom"), thin if visible else None,
                )
                self._write_cell(ws.cell(row=excel_row, column=excel_col), tcell, trow,
                                 table.columns[c_idx].align, family)
                if tcell.merge_right or tcell.merge_down:
                    merges.append((excel_row, excel_col,
                                   excel_row + tcell.merge_down, excel_col + tcell.merge_right))

        for edge in table.edges:
            side = _side(edge.width, border_color)
            top = start_row + edge.row
            bottom = top + edge.rows - 1
            left = 1 + edge.column
            right = left + edge.columns - 1
            for r in range(top, bottom + 1):
                for c in range(left, right + 1):
                    cell_sides = sides.setdefault((r, c), dict.fromkeys(("left", "right", "top", "bottom")))
                    if r == top:
                        cell_sides["top"] = side
                    if r == bottom:
                        cell_sides["bottom"] = side
                    if c == left:
                        cell_sides["left"] = side
                    if c == right:
                        cell_sides["right"] = side

        for start_r, start_c, end_r, end_c in merges:
            ws.merge_cells(start_row=start_r, start_column=start_c, end_row=end_r, end_column=end_c)

        for (r, c), cell_sides in sides.items():
            if any(cell_sides.values()):
                ws.cell(row=r, column=c).border = Border(**cell_sides)

        return start_row + len(table.rows) + 1

    def _write_cell(self, xl_cell, tcell: Cell, trow: Row, column_align: HAlign, family: str) -> None:
        if tcell.runs:
            xl_cell.value = tcell.text
        xl_cell.font = _font(tcell.runs, tcell.font_family or family,
                             bold=tcell.bold, size=TABLE_FONT_SIZE)
        xl_cell.alignment = Alignment(
            horizontal=(tcell.align or column_align).value,
            vertical=tcell.valign.value,
            wrap_text=True,
        )
        fill = _fill(tcell.shading or trow.shading)
        if fill is not None:
            xl_cell.fill = fill


def generate_excel_report(
    tree: DocumentTree,
    output_path: str | Path,
    renderer: Optional[XlsxRenderer] = None,
) -> Path:
    """Render the tree and write the workbook to ``output_path``."""
    output_path = Path(output_path)
    output_path.write_bytes((renderer or XlsxRenderer()).render(tree))
    return output_path
