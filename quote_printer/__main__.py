"""CLI entry point.

Usage:
    python -m quote_printer \
        --quote "quote.json" \
        --out "Quote.xlsx" \
        --tree-out "Quote.tree.json" \
        --date 2026-10-19 \
        --strict

``quote.json`` has the same shape as the body of ``POST /api/v1/render``.
"""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import typer

from quote_printer.models import ValidationError


def generate(
    quote: str = typer.Option(..., "--quote", help="Path to the quote JSON payload"),
    out: str = typer.Option("Quote.xlsx", "--out", help="Output Excel file path"),
    tree_out: str = typer.Option(None, "--tree-out", help="Optional path for the document tree JSON"),
    print_date: str = typer.Option(None, "--date", help="Print date (YYYY-MM-DD); defaults to the payload print_date, then today"),
    no_date: bool = typer.Option(False, "--no-date", help="Leave the print date off the summary page"),
    strict: bool = typer.Option(False, "--strict/--no-strict", help="Reject line items whose costs differ from quantity x unit cost"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level"),
) -> None:
    """Compose a quote into a document tree and render it to Excel."""
    from pydantic import ValidationError as SchemaError

    from quote_printer.excel import generate_excel_report
    from quote_printer.logging_config import setup_logging
    from quote_printer.report import ComposerConfig, QuoteComposer, document_to_json, format_currency
    from quote_printer.schemas import QuoteRequest

    setup_logging(log_level)

    quote_path = Path(quote)
    out_path = Path(out)

    if not quote_path.exists():
        typer.echo(f"ERROR: Quote file not found: {quote_path}", err=True)
        raise typer.Exit(1)

    when = None
    if print_date and not no_date:
        try:
            when = date.fromisoformat(print_date)
        except ValueError:
            typer.echo(f"ERROR: Invalid --date value: {print_date}", err=True)
            raise typer.Exit(1)

    try:
        request = QuoteRequest.model_validate(json.loads(quote_path.read_text(encoding="utf-8")))
    except (json.JSONDecodeError, SchemaError) as e:
        typer.echo(f"ERROR: Invalid quote payload: {e}", err=True)
        raise typer.Exit(1)

    # --date and --no-date win over a print_date in the payload
    if not (no_date or print_date):
        when = request.print_date or date.today()

    typer.echo(f"Quote: {request.title}")
    typer.echo(f"Sections: {len(request.sections)}")
    typer.echo(f"Strict mode: {strict or request.strict}")
    typer.echo("")

    try:
        # Step 1: Build cost model
        q = request.to_quote()

        # Step 2: Compose document tree
        composer = QuoteComposer(ComposerConfig(strict_costs=strict or request.strict))
        tree = composer.build(q, print_date=when)

        for number, section in enumerate(q.sections, start=1):
            typer.echo(f"  {number}. {section.title}: {len(section.items)} item(s)")
            typer.echo(f"     Labour: {format_currency(section.total_labour_cost)}  Material: {format_currency(section.total_material_cost)}")
            typer.echo(f"     Section total: {format_currency(section.total_cost)}")

        typer.echo(f"\n  Extra costs:     {format_currency(q.extra_costs)}")
        typer.echo(f"  Cost deductions: {format_currency(q.cost_deductions)}")
        typer.echo(f"  TOTAL COST:      {format_currency(q.total_cost)}")

        # Step 3: Render Excel
        typer.echo(f"\nGenerating Excel report: {out_path}...")
        generate_excel_report(tree, out_path)
        typer.echo(f"  Excel report saved to: {out_path}")

        # Step 4: Document tree
        if tree_out:
            tree_path = Path(tree_out)
            tree_path.write_text(document_to_json(tree), encoding="utf-8")
            typer.echo(f"  Document tree saved to: {tree_path}")

        typer.echo("\nSUCCESS: Quote report generated.")

    except ValidationError as e:
        typer.echo("\nVALIDATION FAILED:", err=True)
        for error in e.errors:
            typer.echo(f"  ERROR: {error}", err=True)
        typer.echo("\nReport NOT generated.", err=True)
        raise typer.Exit(1)


def main() -> None:
    typer.run(generate)


if __name__ == "__main__":
    main()
