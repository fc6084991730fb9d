"""Fixed style constants and composer configuration."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Callable, Optional

from quote_printer.report.document import Color

# Palette (RGB)
TABLE_BORDER = Color(41, 111, 81)
TABLE_GREEN = Color(240, 249, 240)
TABLE_GRAY = Color(242, 242, 242)

BODY_FONT = "Segoe UI"

# Column widths in cm
SUMMARY_COLUMN_WIDTHS = (1.2, 3.0, 4.0, 4.0, 4.0)
DETAIL_COLUMN_WIDTHS = (1.5, 3.0, 3.0, 3.0, 3.0)

COMPANY_LINE = "Dell Mechanical ● 666 Some Street ● (807) 999-9999"
FOOTER_TEXT = "Dell Mechanical ● 666 Some Street ● Thunder Bay  ON ● (807) 999-9999"
PLACE = "Thunder Bay"

CENTS = Decimal("0.01")


def format_currency(value: Decimal, symbol: str = "$") -> str:
    """Round half-up to cents and format as ``$1,234.50`` / ``-$3.00``."""
    amount = Decimal(value).quantize(CENTS, ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def format_hours(value: Decimal) -> str:
    """Plain decimal without exponent or trailing zeros (``20``, ``7.5``)."""
    if value == value.to_integral_value():
        return str(value.quantize(Decimal("1")))
    return format(value.normalize(), "f")


@dataclass(frozen=True)
class ComposerConfig:
    """Style and formatting options fixed for the lifetime of a composer."""
    border_color: Color = TABLE_BORDER
    header_shade_color: Color = TABLE_GREEN
    row_shade_color: Color = TABLE_GRAY
    body_font_family: str = BODY_FONT
    currency_formatter: Callable[[Decimal], str] = format_currency
    date_provider: Optional[Callable[[], date]] = None

    company_line: str = COMPANY_LINE
    footer_text: str = FOOTER_TEXT
    place: str = PLACE
    author: str = "Dell Mechanical"
    date_format: str = "%d-%B-%Y"
    summary_column_widths: tuple[float, ...] = SUMMARY_COLUMN_WIDTHS
    detail_column_widths: tuple[float, ...] = DETAIL_COLUMN_WIDTHS
    border_width: float = 0.25
    box_width: float = 0.75
    strict_costs: bool = False

    def __post_init__(self) -> None:
        for name in ("summary_column_widths", "detail_column_widths"):
            widths = getattr(self, name)
            if len(widths) != 5:
                raise ValueError(f"'{name}' needs 5 column widths, got {len(widths)}")
            if any(w <= 0 for w in widths):
                raise ValueError(f"'{name}' widths must be positive, got {widths}")
