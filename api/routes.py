"""API routes for the Quote Printer."""

from __future__ import annotations

import base64
import logging

from fastapi import APIRouter

from quote_printer.engine import compute_quote_totals, compute_section_totals
from quote_printer.excel import XlsxRenderer
from quote_printer.models import ValidationError
from quote_printer.report import ComposerConfig, QuoteComposer, document_to_dict
from quote_printer.report.styles import format_hours
from quote_printer.schemas import QuoteRequest

from api.schemas import QuoteSummary, RenderResponse, SectionSummary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1")

_composers = {
    False: QuoteComposer(ComposerConfig(strict_costs=False)),
    True: QuoteComposer(ComposerConfig(strict_costs=True)),
}
_renderer = XlsxRenderer()


@router.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok"}


@router.post("/render", response_model=RenderResponse)
def render(request: QuoteRequest, include_excel: bool = True):
    """Compose a quote and render it.

    Returns the quote totals, the document tree and (unless
    ``include_excel=false``) a base64-encoded .xlsx rendering.
    """
    try:
        # Step 1: Build cost model
        quote = request.to_quote()

        # Step 2: Compose
        tree = _composers[request.strict].build(quote, print_date=request.print_date)
        totals = compute_quote_totals(quote)

        # Step 3: Render
        excel_b64 = None
        if include_excel:
            excel_b64 = base64.b64encode(_renderer.render(tree)).decode("ascii")

        sections = []
        for number, section in enumerate(quote.sections, start=1):
            st = compute_section_totals(section)
            sections.append(SectionSummary(
                number=number,
                title=section.title,
                items=len(section.items),
                labour_hours=format_hours(st.total_labour_hours),
                labour_cost=str(st.total_labour_cost),
                material_cost=str(st.total_material_cost),
                total_cost=str(st.total_cost),
            ))

        summary = QuoteSummary(
            title=quote.title,
            total_labour_hours=format_hours(totals.total_labour_hours),
            subtotal=str(totals.subtotal),
            extra_costs=str(totals.extra_costs),
            cost_deductions=str(totals.cost_deductions),
            total_cost=str(totals.total_cost),
            sections=sections,
        )

        return RenderResponse(
            success=True,
            summary=summary,
            document=document_to_dict(tree),
            excel_base64=excel_b64,
        )

    except ValidationError as e:
        logger.info("Quote '%s' rejected: %d error(s)", request.title, len(e.errors))
        return RenderResponse(
            success=False,
            error_type="validation_error",
            errors=e.errors,
        )
