"""Layer 2 — Cost Aggregation Engine.

All money is summed as Decimal; rounding to minor units only happens when a
value is formatted for presentation.
"""

from __future__ import annotations

import logging

from quote_printer.models import (
    ZERO,
    MalformedQuoteError,
    Quote,
    QuoteTotals,
    Section,
    SectionTotals,
)

logger = logging.getLogger(__name__)


def compute_section_totals(section: Section) -> SectionTotals:
    """Sum one section's line items. An empty section totals zero."""
    if section.items is None:
        raise MalformedQuoteError([f"Section '{section.title}' has no item list"])

    labour_hours = sum((i.labour_hours for i in section.items), ZERO)
    labour_cost = sum((i.labour_cost for i in section.items), ZERO)
    material_cost = sum((i.material_cost for i in section.items), ZERO)

    return SectionTotals(
        total_labour_hours=labour_hours,
        total_labour_cost=labour_cost,
        total_material_cost=material_cost,
        total_cost=labour_cost + material_cost,
    )


def compute_quote_totals(quote: Quote) -> QuoteTotals:
    """Recompute every section bottom-up, then the quote totals."""
    if quote.sections is None:
        raise MalformedQuoteError([f"Quote '{quote.title}' has no section list"])

    section_totals = [compute_section_totals(s) for s in quote.sections]

    hours = sum((t.total_labour_hours for t in section_totals), ZERO)
    subtotal = sum((t.total_cost for t in section_totals), ZERO)
    total = subtotal + quote.extra_costs - quote.cost_deductions

    totals = QuoteTotals(
        total_labour_hours=hours,
        subtotal=subtotal,
        extra_costs=quote.extra_costs,
        cost_deductions=quote.cost_deductions,
        total_cost=total,
    )

    logger.debug(
        "Quote '%s': %d section(s), subtotal=%s, total=%s",
        quote.title, len(section_totals), subtotal, total,
    )
    return totals

