"""Report composition: Quote -> DocumentTree."""
from quote_printer.report.composer import QuoteComposer
from quote_printer.report.document import DocumentTree, Renderer
from quote_printer.report.serialize import document_to_dict, document_to_json
from quote_printer.report.styles import ComposerConfig, format_currency

__all__ = [
    "QuoteComposer",
    "ComposerConfig",
    "DocumentTree",
    "Renderer",
    "document_to_dict",
    "document_to_json",
    "format_currency",
]
