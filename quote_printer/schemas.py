"""Pydantic request models shared by the HTTP API and the CLI."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from quote_printer.models import LineItem, Quote, Section


class LineItemIn(BaseModel):
    description: str
    quantity: int
    unit_labour_cost: Decimal
    unit_material_cost: Decimal
    labour_cost: Decimal | None = None
    material_cost: Decimal | None = None
    labour_hours: Decimal = Decimal("0")

    def to_line_item(self) -> LineItem:
        return LineItem(
            description=self.description,
            quantity=self.quantity,
            unit_labour_cost=self.unit_labour_cost,
            unit_material_cost=self.unit_material_cost,
            labour_cost=self.labour_cost,
            material_cost=self.material_cost,
            labour_hours=self.labour_hours,
        )


class SectionIn(BaseModel):
    title: str
    items: list[LineItemIn] = Field(default_factory=list)


class QuoteRequest(BaseModel):
    title: str
    sections: list[SectionIn] = Field(default_factory=list)
    extra_costs: Decimal = Decimal("0")
    cost_deductions: Decimal = Decimal("0")
    print_date: date | None = None
    strict: bool = False

    def to_quote(self) -> Quote:
        quote = Quote(
            title=self.title,
            extra_costs=self.extra_costs,
            cost_deductions=self.cost_deductions,
        )
        for sec in self.sections:
            section = quote.add_section(Section(title=sec.title))
            for item in sec.items:
                section.add_item(item.to_line_item())
        return quote
