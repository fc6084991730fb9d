"""Excel (.xlsx) rendering adapter."""
from quote_printer.excel.generator import XlsxRenderer, generate_excel_report

__all__ = ["XlsxRenderer", "generate_excel_report"]
