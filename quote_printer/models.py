"""Layer 1 — Cost Model for quote printing.

Quote -> Section -> LineItem. Totals are properties recomputed on every read,
so a Section or Quote never reports totals for items it no longer holds.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Optional, Sequence

ZERO = Decimal("0")


class ValidationError(Exception):
    """Raised when quote data fails validation."""
    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Validation failed with {len(errors)} error(s):\n" +
                         "\n".join(f"  - {e}" for e in errors))


class MalformedQuoteError(ValidationError):
    """Raised when a quote is structurally inconsistent and cannot be composed."""


def to_decimal(value, name: str = "value") -> Decimal:
    """Coerce int/str/Decimal input to a finite Decimal without binary float drift."""
    if isinstance(value, bool) or value is None:
        raise ValidationError([f"'{name}' must be a number, got {value!r}"])
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except InvalidOperation:
            raise ValidationError([f"'{name}' must be a number, got {value!r}"]) from None
    if not result.is_finite():
        raise ValidationError([f"'{name}' must be a finite number, got {value!r}"])
    return result


@dataclass(frozen=True)
class LineItem:
    """One billable entry within a section.

    ``labour_cost`` and ``material_cost`` are derived as quantity x unit cost
    when omitted. An explicitly supplied value is kept as-is.
    """
    description: str
    quantity: int
    unit_labour_cost: Decimal
    unit_material_cost: Decimal
    labour_cost: Optional[Decimal] = None
    material_cost: Optional[Decimal] = None
    labour_hours: Decimal = ZERO

    def __post_init__(self) -> None:
        errors: list[str] = []

        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            errors.append(f"'quantity' must be an integer, got {self.quantity!r}")
        elif self.quantity < 0:
            errors.append(f"'quantity' must be non-negative, got {self.quantity}")

        for name in ("unit_labour_cost", "unit_material_cost", "labour_hours"):
            object.__setattr__(self, name, to_decimal(getattr(self, name), name))

        for name, unit_name in [("labour_cost", "unit_labour_cost"),
                                ("material_cost", "unit_material_cost")]:
            val = getattr(self, name)
            if val is None:
                if not errors:
                    val = self.quantity * getattr(self, unit_name)
            else:
                val = to_decimal(val, name)
            object.__setattr__(self, name, val)

        for name in ("unit_labour_cost", "unit_material_cost", "labour_cost",
                     "material_cost", "labour_hours"):
            val = getattr(self, name)
            if val is not None and val < 0:
                errors.append(f"'{name}' must be non-negative, got {val}")

        if errors:
            raise ValidationError([f"Line item '{self.description}': {e}" for e in errors])

    @property
    def derived_labour_cost(self) -> Decimal:
        return self.quantity * self.unit_labour_cost

    @property
    def derived_material_cost(self) -> Decimal:
        return self.quantity * self.unit_material_cost

    @property
    def total_cost(self) -> Decimal:
        return self.labour_cost + self.material_cost


@dataclass
class Section:
    """A named job within a quote; items keep their presentation order.

    A tuple of items is copied into a list so items can still be appended.
    """
    title: str
    items: list[LineItem] = field(default_factory=list)

    def __post_init__(self) -> None:
        if isinstance(self.items, tuple):
            self.items = list(self.items)

    def add_item(self, item: LineItem) -> LineItem:
        if not isinstance(item, LineItem):
            raise ValidationError([f"Section '{self.title}': expected LineItem, got {type(item).__name__}"])
        self.items.append(item)
        return item

    @property
    def total_labour_hours(self) -> Decimal:
        return sum((i.labour_hours for i in self.items), ZERO)

    @property
    def total_labour_cost(self) -> Decimal:
        return sum((i.labour_cost for i in self.items), ZERO)

    @property
    def total_material_cost(self) -> Decimal:
        return sum((i.material_cost for i in self.items), ZERO)

    @property
    def total_cost(self) -> Decimal:
        return self.total_labour_cost + self.total_material_cost

    @classmethod
    def from_columns(
        cls,
        title: str,
        material_types: Sequence[str],
        quantities: Sequence[int],
        labour_unit_costs: Sequence,
        material_unit_costs: Sequence,
        labour_costs: Optional[Sequence] = None,
        material_costs: Optional[Sequence] = None,
        labour_hours: Optional[Sequence] = None,
    ) -> Section:
        """Build a Section from same-length parallel columns.

        Every supplied column must have exactly one entry per material type.
        """
        expected = len(material_types)
        columns = {
            "quantities": quantities,
            "labour_unit_costs": labour_unit_costs,
            "material_unit_costs": material_unit_costs,
            "labour_costs": labour_costs,
            "material_costs": material_costs,
            "labour_hours": labour_hours,
        }
        errors = [
            f"Section '{title}': column '{name}' has {len(col)} entries, expected {expected}"
            for name, col in columns.items()
            if col is not None and len(col) != expected
        ]
        if errors:
            raise MalformedQuoteError(errors)

        section = cls(title=title)
        for idx, desc in enumerate(material_types):
            section.add_item(LineItem(
                description=desc,
                quantity=quantities[idx],
                unit_labour_cost=labour_unit_costs[idx],
                unit_material_cost=material_unit_costs[idx],
                labour_cost=labour_costs[idx] if labour_costs is not None else None,
                material_cost=material_costs[idx] if material_costs is not None else None,
                labour_hours=labour_hours[idx] if labour_hours is not None else ZERO,
            ))
        return section


@dataclass
class Quote:
    """Top-level cost document; exclusively owns its sections."""
    title: str
    sections: list[Section] = field(default_factory=list)
    extra_costs: Decimal = ZERO
    cost_deductions: Decimal = ZERO

    def __post_init__(self) -> None:
        if isinstance(self.sections, tuple):
            self.sections = list(self.sections)
        self.extra_costs = to_decimal(self.extra_costs, "extra_costs")
        self.cost_deductions = to_decimal(self.cost_deductions, "cost_deductions")
        errors = [
            f"'{name}' must be non-negative, got {val}"
            for name, val in [("extra_costs", self.extra_costs),
                              ("cost_deductions", self.cost_deductions)]
            if val < 0
        ]
        if errors:
            raise ValidationError(errors)

    def add_section(self, section: Section) -> Section:
        if not isinstance(section, Section):
            raise ValidationError([f"Expected Section, got {type(section).__name__}"])
        if any(s is section for s in self.sections):
            raise ValidationError([f"Section '{section.title}' already belongs to this quote"])
        self.sections.append(section)
        return section

    @property
    def total_labour_hours(self) -> Decimal:
        return sum((s.total_labour_hours for s in self.sections), ZERO)

    @property
    def subtotal(self) -> Decimal:
        return sum((s.total_cost for s in self.sections), ZERO)

    @property
    def total_cost(self) -> Decimal:
        return self.subtotal + self.extra_costs - self.cost_deductions


@dataclass(frozen=True)
class SectionTotals:
    total_labour_hours: Decimal
    total_labour_cost: Decimal
    total_material_cost: Decimal
    total_cost: Decimal


@dataclass(frozen=True)
class QuoteTotals:
    total_labour_hours: Decimal
    subtotal: Decimal
    extra_costs: Decimal
    cost_deductions: Decimal
    total_cost: Decimal
