"""Cost aggregation and validation engines."""
from quote_printer.engine.validator import validate_quote
from quote_printer.engine.calculator import compute_quote_totals, compute_section_totals

__all__ = ["validate_quote", "compute_quote_totals", "compute_section_totals"]
