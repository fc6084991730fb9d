"""Tests for the report composer."""

import pytest
from datetime import date
from decimal import Decimal

from quote_printer.models import LineItem, MalformedQuoteError, Quote, Section
from quote_printer.report.composer import HEADER_ROWS, QuoteComposer
from quote_printer.report.document import HAlign, TextStyle, VAlign
from quote_printer.report.serialize import document_to_dict, document_to_json
from quote_printer.report.styles import (
    TABLE_BORDER,
    TABLE_GRAY,
    TABLE_GREEN,
    ComposerConfig,
    format_currency,
    format_hours,
)

TRAILING_ROWS = 5  # spacer, labour hours, extra costs, deductions, total


def _make_item(desc, qty, labour, material, hours="0") -> LineItem:
    return LineItem(
        description=desc,
        quantity=qty,
        unit_labour_cost=Decimal(labour),
        unit_material_cost=Decimal(material),
        labour_hours=Decimal(hours),
    )


def _make_quote() -> Quote:
    quote = Quote(title="Test Quote Document", extra_costs=Decimal("55"),
                  cost_deductions=Decimal("10"))
    s1 = quote.add_section(Section(title="Above Ground DMV"))
    s1.add_item(_make_item("Copper", 1, "400", "500", hours="20"))
    s2 = quote.add_section(Section(title="Boiler Room"))
    s2.add_item(_make_item("Valves", 2, "250", "100", hours="24"))
    s2.add_item(_make_item("Fittings", 3, "0", "100", hours="0.5"))
    return quote


@pytest.fixture
def composer():
    return QuoteComposer()


class TestFormatting:
    def test_format_currency(self):
        assert format_currency(Decimal("1234.5")) == "$1,234.50"
        assert format_currency(Decimal("0.005")) == "$0.01"
        assert format_currency(Decimal("-3")) == "-$3.00"

    def test_format_hours(self):
        assert format_hours(Decimal("20")) == "20"
        assert format_hours(Decimal("20.00")) == "20"
        assert format_hours(Decimal("7.50")) == "7.5"


class TestSummaryPage:
    def test_page_order(self, composer):
        tree = composer.build(_make_quote())
        assert [p.name for p in tree.pages] == ["Summary", "Above Ground DMV", "Boiler Room"]
        assert tree.subject == "Test Quote Document"

    def test_row_counts(self, composer):
        table = composer.build(_make_quote()).pages[0].table
        assert len(table.columns) == 5
        assert len(table.rows) == HEADER_ROWS + 2 * 2 + TRAILING_ROWS

    def test_header_merges(self, composer):
        table = composer.build(_make_quote()).pages[0].table
        top, bottom = table.rows[0], table.rows[1]
        assert top.heading and bottom.heading
        assert top.shading == TABLE_GREEN
        assert top.cells[0].text == "Section No."
        assert top.cells[0].merge_down == 1
        assert top.cells[1].text == "Job Name"
        assert top.cells[1].merge_right == 2
        assert top.cells[4].text == "Section Cost"
        assert top.cells[4].merge_down == 1
        assert [c.text for c in bottom.cells[1:4]] == ["Labour Hours", "Labour Cost", "Material Cost"]
        assert table.edges[0].row == 0 and table.edges[0].rows == 2

    def test_section_row_pairs(self, composer):
        table = composer.build(_make_quote()).pages[0].table
        row_a, row_b = table.rows[2], table.rows[3]
        assert row_a.cells[0].text == "1"
        assert row_a.cells[0].merge_down == 1
        assert row_a.cells[0].shading == TABLE_GRAY
        assert row_a.cells[0].valign == VAlign.CENTER
        assert row_a.cells[1].text == "Above Ground DMV"
        assert row_a.cells[1].runs[0].style == TextStyle.TITLE
        assert row_a.cells[1].merge_right == 2
        assert row_a.cells[4].text == "$900.00"
        assert row_a.cells[4].value == Decimal("900")
        assert row_a.cells[4].merge_down == 1
        assert row_b.cells[1].text == "20 hrs"
        assert row_b.cells[2].text == "$400.00"
        assert row_b.cells[3].text == "$500.00"

        second = table.rows[4]
        assert second.cells[0].text == "2"
        # 2 x 250 + 0 labour, 2 x 100 + 3 x 100 material
        assert second.cells[4].value == Decimal("1000")

    def test_trailing_rows(self, composer):
        table = composer.build(_make_quote()).pages[0].table
        spacer, hours, extra, deduction, total = table.rows[-TRAILING_ROWS:]
        assert not spacer.borders_visible
        assert all(not c.borders_visible for c in spacer.cells)
        assert hours.cells[0].text == "Total Labour Hours"
        assert hours.cells[4].text == "44.5"
        assert extra.cells[0].text == "Extra Costs"
        assert extra.cells[4].text == "$55.00"
        assert deduction.cells[0].text == "Cost Deductions"
        assert deduction.cells[4].text == "($10.00)"
        assert total.cells[0].text == "Total Cost"
        # 900 + 1000 + 55 - 10
        assert total.cells[4].value == Decimal("1945")
        assert total.cells[4].bold
        for row in (hours, extra, deduction, total):
            label = row.cells[0]
            assert label.merge_right == 3
            assert not label.borders_visible
            assert label.bold
            assert label.align == HAlign.RIGHT
        box = table.edges[-1]
        assert (box.column, box.row, box.columns, box.rows) == (4, len(table.rows) - 4, 1, 4)

    def test_frame_and_comment_box(self, composer):
        page = composer.build(_make_quote()).pages[0]
        assert page.frames[0].paragraphs[1].text == "Test Quote Document"
        assert page.notes[0].text.startswith("Comments")
        assert page.notes[0].border_color == TABLE_BORDER
        assert page.notes[0].shading == TABLE_GRAY
        assert page.footer

    def test_no_date_by_default(self, composer):
        heading = composer.build(_make_quote()).pages[0].headings[0]
        assert heading.text == "QUOTE SUMMARY"

    def test_explicit_print_date(self, composer):
        heading = composer.build(_make_quote(), print_date=date(2026, 10, 19)).pages[0].headings[0]
        assert heading.text.endswith("Thunder Bay, 19-October-2026")

    def test_date_provider(self):
        composer = QuoteComposer(ComposerConfig(date_provider=lambda: date(2026, 1, 2)))
        heading = composer.build(_make_quote()).pages[0].headings[0]
        assert "02-January-2026" in heading.text


class TestSectionPage:
    def test_header(self, composer):
        page = composer.build(_make_quote()).pages[2]
        assert page.headings[0].text == "Boiler Room"
        assert page.headings[0].runs[0].style == TextStyle.UNDERLINE
        top, bottom = page.table.rows[0], page.table.rows[1]
        assert top.cells[0].text == "Quantity"
        assert top.cells[0].merge_down == 1
        assert top.cells[1].text == "Material Type"
        assert top.cells[1].merge_right == 3
        assert [c.text for c in bottom.cells[1:]] == [
            "Labour Unit Price", "Labour Price", "Material Unit Price", "Material Price",
        ]

    def test_item_rows(self, composer):
        table = composer.build(_make_quote()).pages[2].table
        assert len(table.rows) == HEADER_ROWS + 2 * 2 + 1
        row_a, row_b = table.rows[2], table.rows[3]
        assert row_a.cells[0].text == "2"
        assert row_a.cells[0].merge_down == 1
        assert row_a.cells[1].text == "Valves"
        assert [c.text for c in row_b.cells[1:]] == [
            "$250.00/unit", "$500.00", "$100.00/unit", "$200.00",
        ]
        assert table.rows[4].cells[1].text == "Fittings"

    def test_totals_row(self, composer):
        table = composer.build(_make_quote()).pages[2].table
        row = table.rows[-1]
        assert row.cells[0].text == "Labour Total"
        assert row.cells[0].merge_right == 1
        assert not row.cells[0].borders_visible
        assert row.cells[2].text == "$500.00"
        assert row.cells[3].text == "Materials Total"
        assert row.cells[4].text == "$500.00"
        last = len(table.rows) - 1
        boxes = [(e.column, e.row) for e in table.edges[-2:]]
        assert boxes == [(2, last), (4, last)]

    def test_empty_section(self, composer):
        quote = Quote(title="X")
        quote.add_section(Section(title="Nothing yet"))
        table = composer.build(quote).pages[1].table
        assert len(table.rows) == HEADER_ROWS + 1
        assert table.rows[-1].cells[2].value == Decimal("0")
        assert table.rows[-1].cells[4].value == Decimal("0")


class TestEdgeCases:
    def test_empty_quote(self, composer):
        quote = Quote(title="X", extra_costs=Decimal("55"), cost_deductions=Decimal("10"))
        tree = composer.build(quote)
        assert len(tree.pages) == 1
        table = tree.pages[0].table
        assert len(table.rows) == HEADER_ROWS + TRAILING_ROWS
        assert table.rows[-1].cells[4].value == Decimal("45")

    def test_custom_formatter(self):
        composer = QuoteComposer(ComposerConfig(currency_formatter=lambda v: f"{v} EUR"))
        table = composer.build(_make_quote()).pages[0].table
        assert table.rows[2].cells[4].text == "900 EUR"

    def test_malformed_quote_raises(self, composer):
        quote = _make_quote()
        quote.sections[1].items = None
        with pytest.raises(MalformedQuoteError):
            composer.build(quote)

    def test_tuple_sections_and_items(self, composer):
        section = Section(title="S", items=(_make_item("Pipe", 1, "1", "1"),))
        quote = Quote(title="X", sections=(section,))
        tree = composer.build(quote)
        assert [p.name for p in tree.pages] == ["Summary", "S"]
        assert tree.pages[0].table.rows[-1].cells[4].value == Decimal("2")

    def test_negative_quantity_raises(self, composer):
        quote = _make_quote()
        object.__setattr__(quote.sections[0].items[0], "quantity", -1)
        with pytest.raises(MalformedQuoteError, match="negative quantity"):
            composer.build(quote)

    def test_strict_costs(self):
        quote = Quote(title="X")
        section = quote.add_section(Section(title="S"))
        section.add_item(LineItem("A", 2, Decimal("10"), Decimal("20"),
                                  labour_cost=Decimal("10"), material_cost=Decimal("20")))
        assert QuoteComposer().build(quote).pages[1].table.rows[-1].cells[2].value == Decimal("10")
        with pytest.raises(MalformedQuoteError, match="does not match"):
            QuoteComposer(ComposerConfig(strict_costs=True)).build(quote)

    def test_invalid_column_widths(self):
        with pytest.raises(ValueError, match="5 column widths"):
            ComposerConfig(summary_column_widths=(1.0, 2.0))


class TestIdempotence:
    def test_same_quote_same_tree(self, composer):
        quote = _make_quote()
        first = composer.build(quote, print_date=date(2026, 10, 19))
        second = composer.build(quote, print_date=date(2026, 10, 19))
        assert first == second
        assert document_to_json(first) == document_to_json(second)

    def test_rebuild_after_mutation(self, composer):
        quote = _make_quote()
        before = composer.build(quote)
        quote.sections[0].add_item(_make_item("Hangers", 1, "0", "45"))
        after = composer.build(quote)
        assert before.pages[0].table.rows[-1].cells[4].value == Decimal("1945")
        assert after.pages[0].table.rows[-1].cells[4].value == Decimal("1990")

    def test_serialized_values(self, composer):
        data = document_to_dict(composer.build(_make_quote()))
        summary = data["pages"][0]
        assert summary["table"]["columns"][0]["align"] == "center"
        assert summary["table"]["border_color"] == TABLE_BORDER.hex
        assert summary["table"]["rows"][2]["cells"][4]["value"] == Decimal("900")
        assert '"value": "900"' in document_to_json(composer.build(_make_quote()))
