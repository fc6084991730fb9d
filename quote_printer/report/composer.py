"""Layer 3 — Report Composer.

Translates a Quote into a DocumentTree: one summary page (one row pair per
section plus the quote totals) followed by one detail page per section (one
row pair per line item plus the section totals).

The quote is validated before anything is built, so callers either get a
complete tree or a MalformedQuoteError.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from quote_printer.engine import compute_quote_totals, compute_section_totals, validate_quote
from quote_printer.models import LineItem, Quote, QuoteTotals, Section
from quote_printer.report.document import (
    Cell,
    Column,
    DocumentTree,
    HAlign,
    Page,
    PageSetup,
    Paragraph,
    Row,
    Table,
    TextFrame,
    TextRun,
    TextStyle,
    VAlign,
)
from quote_printer.report.styles import ComposerConfig, format_hours

logger = logging.getLogger(__name__)

NUM_COLUMNS = 5
HEADER_ROWS = 2

SUMMARY_HEADERS = ("Section No.", "Job Name", "Labour Hours", "Labour Cost", "Material Cost", "Section Cost")
DETAIL_HEADERS = ("Quantity", "Material Type", "Labour Unit Price", "Labour Price",
                  "Material Unit Price", "Material Price")

SUMMARY_SETUP = PageSetup(top_margin_cm=2.0, bottom_margin_cm=2.0)
DETAIL_SETUP = PageSetup(top_margin_cm=1.25, bottom_margin_cm=1.25,
                         left_margin_cm=4.0, right_margin_cm=4.0)


class QuoteComposer:
    """One-shot builder: ``build(quote)`` returns a fresh DocumentTree."""

    def __init__(self, config: Optional[ComposerConfig] = None):
        self.config = config or ComposerConfig()

    def build(self, quote: Quote, print_date: Optional[date] = None) -> DocumentTree:
        """Compose the summary page and one detail page per section.

        ``print_date`` overrides ``config.date_provider``; with neither, the
        summary heading carries no date.
        """
        validate_quote(quote, check_consistency=self.config.strict_costs)
        totals = compute_quote_totals(quote)

        if print_date is None and self.config.date_provider is not None:
            print_date = self.config.date_provider()

        tree = DocumentTree(
            title="Quote Document",
            subject=quote.title,
            author=self.config.author,
            font_family=self.config.body_font_family,
        )
        tree.pages.append(self._summary_page(quote, totals, print_date))
        for section in quote.sections:
            tree.pages.append(self._section_page(section))

        logger.debug("Composed quote '%s' into %d page(s)", quote.title, len(tree.pages))
        return tree

    # ------------------------------------------------------------------
    # Shared building blocks
    # ------------------------------------------------------------------

    def _money(self, value: Decimal) -> str:
        return self.config.currency_formatter(value)

    def _new_page(self, name: str, setup: PageSetup) -> Page:
        return Page(
            name=name,
            footer=self.config.footer_text,
            setup=PageSetup(**vars(setup)),
        )

    def _new_table(self, widths: tuple[float, ...]) -> Table:
        columns = [Column(width_cm=w, align=HAlign.RIGHT) for w in widths]
        columns[0].align = HAlign.CENTER
        return Table(
            columns=columns,
            border_color=self.config.border_color,
            border_width=self.config.border_width,
        )

    def _header_rows(self, table: Table, headers: tuple[str, ...], first_span: int,
                     merged_last: bool) -> None:
        """Two shaded heading rows.

        ``headers[0]`` is merged down over both rows; ``headers[1]`` spans
        ``first_span`` extra columns in the first row only; the remaining
        labels fill the second row, except for the last column when
        ``merged_last`` puts it merged down in column 4.
        """
        top = table.add_row(heading=True, shading=self.config.header_shade_color)
        bottom = table.add_row(heading=True, shading=self.config.header_shade_color)
        for row in (top, bottom):
            for cell in row.cells:
                cell.bold = True
                cell.align = HAlign.CENTER

        first = top.cells[0]
        first.add_text(headers[0])
        first.bold = False
        first.align = HAlign.LEFT
        first.valign = VAlign.BOTTOM
        first.merge_down = 1

        span = top.cells[1]
        span.add_text(headers[1])
        span.align = HAlign.LEFT
        span.merge_right = first_span

        sub_labels = headers[2:-1] if merged_last else headers[2:]
        for offset, label in enumerate(sub_labels, start=1):
            bottom.cells[offset].add_text(label)
            bottom.cells[offset].align = HAlign.LEFT

        if merged_last:
            last = top.cells[NUM_COLUMNS - 1]
            last.add_text(headers[-1])
            last.align = HAlign.LEFT
            last.valign = VAlign.BOTTOM
            last.merge_down = 1

        table.box(0, 0, NUM_COLUMNS, HEADER_ROWS, self.config.box_width)

    def _data_pair(self, table: Table, key: str, title: str, span: int) -> tuple[Row, Row]:
        """Two rows for one record: key merged down in column 0, title in row A."""
        row_a = table.add_row(top_padding=1.5)
        row_b = table.add_row()

        key_cell = row_a.cells[0]
        key_cell.add_text(key)
        key_cell.shading = self.config.row_shade_color
        key_cell.valign = VAlign.CENTER
        key_cell.merge_down = 1

        title_cell = row_a.cells[1]
        title_cell.runs.append(TextRun(title, TextStyle.TITLE))
        title_cell.align = HAlign.LEFT
        title_cell.merge_right = span
        return row_a, row_b

    def _label_cell(self, cell: Cell, label: str, merge_right: int) -> None:
        cell.add_text(label)
        cell.borders_visible = False
        cell.bold = True
        cell.align = HAlign.RIGHT
        cell.merge_right = merge_right

    def _value_cell(self, cell: Cell, value: Decimal, text: str, bold: bool = False) -> None:
        cell.value = value
        cell.add_text(text, TextStyle.BOLD if bold else TextStyle.NORMAL)
        cell.font_family = self.config.body_font_family
        cell.bold = bold

    # ------------------------------------------------------------------
    # Summary page
    # ------------------------------------------------------------------

    def _summary_page(self, quote: Quote, totals: QuoteTotals,
                      print_date: Optional[date]) -> Page:
        cfg = self.config
        page = self._new_page("Summary", SUMMARY_SETUP)

        page.frames.append(TextFrame(
            left_cm=0.0, top_cm=1.5, width_cm=7.0, height_cm=3.0,
            paragraphs=[
                Paragraph(runs=[TextRun(cfg.company_line, TextStyle.BOLD)]),
                Paragraph(runs=[TextRun(quote.title)]),
            ],
        ))

        heading = Paragraph(runs=[TextRun("QUOTE SUMMARY", TextStyle.BOLD)])
        if print_date is not None:
            heading.runs.append(TextRun("\t"))
            heading.runs.append(TextRun(f"{cfg.place}, {print_date.strftime(cfg.date_format)}"))
        page.headings.append(heading)

        table = self._new_table(cfg.summary_column_widths)
        self._header_rows(table, SUMMARY_HEADERS, first_span=2, merged_last=True)

        for number, section in enumerate(quote.sections, start=1):
            self._summary_section_rows(table, number, section)

        spacer = table.add_row(borders_visible=False)
        for cell in spacer.cells:
            cell.borders_visible = False

        summary_rows = [
            ("Total Labour Hours", totals.total_labour_hours, format_hours(totals.total_labour_hours), False),
            ("Extra Costs", totals.extra_costs, self._money(totals.extra_costs), False),
            ("Cost Deductions", totals.cost_deductions, f"({self._money(totals.cost_deductions)})", False),
            ("Total Cost", totals.total_cost, self._money(totals.total_cost), True),
        ]
        for label, value, text, bold in summary_rows:
            row = table.add_row()
            self._label_cell(row.cells[0], label, merge_right=NUM_COLUMNS - 2)
            self._value_cell(row.cells[NUM_COLUMNS - 1], value, text, bold=bold)

        table.box(NUM_COLUMNS - 1, len(table.rows) - len(summary_rows), 1,
                  len(summary_rows), cfg.box_width)
        page.table = table

        page.notes.append(Paragraph(
            runs=[TextRun("Comments\n\n\n")],
            align=HAlign.LEFT,
            shading=cfg.row_shade_color,
            border_color=cfg.border_color,
            border_width=cfg.box_width,
            space_before_cm=1.0,
        ))
        return page

    def _summary_section_rows(self, table: Table, number: int, section: Section) -> None:
        totals = compute_section_totals(section)
        row_a, row_b = self._data_pair(table, str(number), section.title, span=2)

        cost = row_a.cells[NUM_COLUMNS - 1]
        cost.value = totals.total_cost
        cost.add_text(self._money(totals.total_cost))
        cost.shading = self.config.row_shade_color
        cost.valign = VAlign.BOTTOM
        cost.merge_down = 1

        hours = row_b.cells[1]
        hours.value = totals.total_labour_hours
        hours.add_text(f"{format_hours(totals.total_labour_hours)} hrs")
        for cell, value in [(row_b.cells[2], totals.total_labour_cost),
                            (row_b.cells[3], totals.total_material_cost)]:
            cell.value = value
            cell.add_text(self._money(value))

        table.box(0, len(table.rows) - 2, NUM_COLUMNS, 2, self.config.box_width)

    # ------------------------------------------------------------------
    # Section detail page
    # ------------------------------------------------------------------

    def _section_page(self, section: Section) -> Page:
        cfg = self.config
        page = self._new_page(section.title, DETAIL_SETUP)
        page.headings.append(Paragraph(runs=[TextRun(section.title, TextStyle.UNDERLINE)]))

        table = self._new_table(cfg.detail_column_widths)
        self._header_rows(table, DETAIL_HEADERS, first_span=3, merged_last=False)

        for item in section.items:
            self._item_rows(table, item)

        totals = compute_section_totals(section)
        row = table.add_row()
        self._label_cell(row.cells[0], "Labour Total", merge_right=1)
        self._value_cell(row.cells[2], totals.total_labour_cost, self._money(totals.total_labour_cost))
        self._label_cell(row.cells[3], "Materials Total", merge_right=0)
        self._value_cell(row.cells[4], totals.total_material_cost, self._money(totals.total_material_cost))

        last = len(table.rows) - 1
        table.box(2, last, 1, 1, cfg.box_width)
        table.box(4, last, 1, 1, cfg.box_width)
        page.table = table
        return page

    def _item_rows(self, table: Table, item: LineItem) -> None:
        _, row_b = self._data_pair(table, str(item.quantity), item.description, span=3)

        prices = [
            (item.unit_labour_cost, "/unit"),
            (item.labour_cost, ""),
            (item.unit_material_cost, "/unit"),
            (item.material_cost, ""),
        ]
        for cell, (value, suffix) in zip(row_b.cells[1:], prices):
            cell.value = value
            cell.add_text(f"{self._money(value)}{suffix}")

        table.box(0, len(table.rows) - 2, NUM_COLUMNS, 2, self.config.box_width)
