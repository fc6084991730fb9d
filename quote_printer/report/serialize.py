"""Document Tree serialization.

Produces a plain dict / JSON view of a DocumentTree for hand-off to external
renderers and for comparing trees.
"""

from __future__ import annotations

import json
from dataclasses import fields, is_dataclass
from decimal import Decimal
from enum import Enum

from quote_printer.report.document import Color, DocumentTree


class DecimalEncoder(json.JSONEncoder):
    """JSON encoder that keeps Decimal values exact (as strings)."""
    def default(self, obj):
        if isinstance(obj, Decimal):
            return str(obj)
        return super().default(obj)


def _to_plain(obj):
    if isinstance(obj, Color):
        return obj.hex
    if isinstance(obj, Enum):
        return obj.value
    if is_dataclass(obj):
        return {f.name: _to_plain(getattr(obj, f.name)) for f in fields(obj)}
    if isinstance(obj, (list, tuple)):
        return [_to_plain(v) for v in obj]
    return obj


def document_to_dict(tree: DocumentTree) -> dict:
    """Build a dict view of the tree (no file I/O). Decimals stay Decimal."""
    return _to_plain(tree)


def document_to_json(tree: DocumentTree, indent: int | None = 2) -> str:
    return json.dumps(document_to_dict(tree), indent=indent, cls=DecimalEncoder,
                      ensure_ascii=False)
