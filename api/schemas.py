"""Pydantic response models for the Quote API."""

from __future__ import annotations

from pydantic import BaseModel


class SectionSummary(BaseModel):
    number: int
    title: str
    items: int
    labour_hours: str
    labour_cost: str
    material_cost: str
    total_cost: str


class QuoteSummary(BaseModel):
    title: str
    total_labour_hours: str
    subtotal: str
    extra_costs: str
    cost_deductions: str
    total_cost: str
    sections: list[SectionSummary]


class RenderResponse(BaseModel):
    success: bool
    summary: QuoteSummary | None = None
    document: dict | None = None
    excel_base64: str | None = None
    error_type: str | None = None
    errors: list[str] | None = None
