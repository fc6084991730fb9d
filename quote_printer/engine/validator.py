"""Layer 2 — Quote Validation Engine.

Checks a whole quote before it is composed. Every problem is collected and
reported at once in a single MalformedQuoteError.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from quote_printer.models import LineItem, MalformedQuoteError, Quote, Section

logger = logging.getLogger(__name__)

# Explicit costs may differ from quantity x unit cost by less than half a cent.
COST_TOLERANCE = Decimal("0.005")


def validate_quote(quote: Quote, check_consistency: bool = False) -> Quote:
    """Validate the quote structure and every line item.

    With ``check_consistency`` an explicit labour/material cost that does not
    match quantity x unit cost is an error; otherwise it is logged and the
    explicit value is used.
    Returns the quote if all checks pass.
    """
    errors: list[str] = []

    if not isinstance(quote, Quote):
        raise MalformedQuoteError([f"Expected Quote, got {type(quote).__name__}"])

    # --- Quote-level adjustments ---
    for name in ("extra_costs", "cost_deductions"):
        val = getattr(quote, name)
        if not isinstance(val, Decimal) or not val.is_finite():
            errors.append(f"Quote '{quote.title}': {name} is not a finite decimal ({val!r})")
        elif val < 0:
            errors.append(f"Quote '{quote.title}': negative {name}={val}")

    if not isinstance(quote.sections, (list, tuple)):
        errors.append(f"Quote '{quote.title}': sections must be a list or tuple, got {type(quote.sections).__name__}")
        raise MalformedQuoteError(errors)

    seen: set[int] = set()
    for s_idx, section in enumerate(quote.sections, start=1):
        if not isinstance(section, Section):
            errors.append(f"Section {s_idx}: expected Section, got {type(section).__name__}")
            continue
        if id(section) in seen:
            errors.append(f"Section {s_idx} '{section.title}': appears more than once in the quote")
        seen.add(id(section))

        if not isinstance(section.items, (list, tuple)):
            errors.append(f"Section {s_idx} '{section.title}': items must be a list or tuple, "
                          f"got {type(section.items).__name__}")
            continue

        for i_idx, item in enumerate(section.items, start=1):
            where = f"Section {s_idx} '{section.title}', item {i_idx}"
            if not isinstance(item, LineItem):
                errors.append(f"{where}: expected LineItem, got {type(item).__name__}")
                continue
            errors.extend(_check_item(item, where, check_consistency))

    if errors:
        raise MalformedQuoteError(errors)

    return quote


def _check_item(item: LineItem, where: str, check_consistency: bool) -> list[str]:
    errors: list[str] = []

    if isinstance(item.quantity, bool) or not isinstance(item.quantity, int):
        errors.append(f"{where}: quantity is not an integer ({item.quantity!r})")
        return errors
    if item.quantity < 0:
        errors.append(f"{where}: negative quantity={item.quantity}")

    for attr in ("unit_labour_cost", "unit_material_cost", "labour_cost",
                 "material_cost", "labour_hours"):
        val = getattr(item, attr)
        if not isinstance(val, Decimal) or not val.is_finite():
            errors.append(f"{where}: {attr} is not a finite decimal ({val!r})")
        elif val < 0:
            errors.append(f"{where}: negative {attr}={val}")

    if errors:
        return errors

    for attr, derived in [("labour_cost", item.derived_labour_cost),
                          ("material_cost", item.derived_material_cost)]:
        explicit = getattr(item, attr)
        if abs(explicit - derived) > COST_TOLERANCE:
            msg = (f"{where}: {attr}={explicit} does not match "
                   f"quantity x unit cost={derived}")
            if check_consistency:
                errors.append(msg)
            else:
                logger.warning("%s (using supplied value)", msg)

    return errors
