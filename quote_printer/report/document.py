"""Document Tree — renderer-agnostic description of a paginated table report.

This is the only contract between composition and rendering: a renderer needs
no knowledge of quotes or costs to turn it into a file.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional, Protocol


class HAlign(Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class VAlign(Enum):
    TOP = "top"
    CENTER = "center"
    BOTTOM = "bottom"


class TextStyle(Enum):
    NORMAL = "normal"
    BOLD = "bold"
    UNDERLINE = "underline"
    TITLE = "title"


@dataclass(frozen=True)
class Color:
    red: int
    green: int
    blue: int

    def __post_init__(self) -> None:
        for name, val in [("red", self.red), ("green", self.green), ("blue", self.blue)]:
            if not 0 <= val <= 255:
                raise ValueError(f"Color channel '{name}' must be 0-255, got {val}")

    @property
    def hex(self) -> str:
        return f"{self.red:02X}{self.green:02X}{self.blue:02X}"


@dataclass
class TextRun:
    text: str
    style: TextStyle = TextStyle.NORMAL


@dataclass
class Paragraph:
    runs: list[TextRun] = field(default_factory=list)
    align: HAlign = HAlign.LEFT
    shading: Optional[Color] = None
    border_color: Optional[Color] = None
    border_width: float = 0.0
    space_before_cm: float = 0.0

    @property
    def text(self) -> str:
        return "".join(r.text for r in self.runs)


@dataclass
class TextFrame:
    """Free-floating block positioned relative to the page margins."""
    left_cm: float
    top_cm: float
    width_cm: float
    height_cm: float
    paragraphs: list[Paragraph] = field(default_factory=list)


@dataclass
class Cell:
    runs: list[TextRun] = field(default_factory=list)
    value: Optional[Decimal] = None
    shading: Optional[Color] = None
    borders_visible: bool = True
    merge_right: int = 0
    merge_down: int = 0
    align: Optional[HAlign] = None
    valign: VAlign = VAlign.TOP
    bold: bool = False
    font_family: Optional[str] = None

    @property
    def text(self) -> str:
        return "".join(r.text for r in self.runs)

    def add_text(self, text: str, style: TextStyle = TextStyle.NORMAL) -> Cell:
        self.runs.append(TextRun(text, style))
        return self


@dataclass
class Row:
    cells: list[Cell]
    heading: bool = False
    shading: Optional[Color] = None
    borders_visible: bool = True
    top_padding: float = 0.0


@dataclass
class Column:
    width_cm: float
    align: HAlign = HAlign.RIGHT


@dataclass(frozen=True)
class BoxEdge:
    """A heavier border drawn around a rectangular range of cells."""
    column: int
    row: int
    columns: int
    rows: int
    width: float


@dataclass
class Table:
    columns: list[Column]
    rows: list[Row] = field(default_factory=list)
    border_color: Optional[Color] = None
    border_width: float = 0.25
    edges: list[BoxEdge] = field(default_factory=list)

    def add_row(self, **kwargs) -> Row:
        row = Row(cells=[Cell() for _ in self.columns], **kwargs)
        self.rows.append(row)
        return row

    def box(self, column: int, row: int, columns: int, rows: int, width: float) -> BoxEdge:
        if (column < 0 or row < 0 or columns < 1 or rows < 1
                or column + columns > len(self.columns)
                or row + rows > len(self.rows)):
            raise ValueError(
                f"Box ({column}, {row}, {columns}x{rows}) is outside a "
                f"{len(self.columns)}x{len(self.rows)} table"
            )
        edge = BoxEdge(column, row, columns, rows, width)
        self.edges.append(edge)
        return edge


@dataclass
class PageSetup:
    top_margin_cm: Optional[float] = None
    bottom_margin_cm: Optional[float] = None
    left_margin_cm: Optional[float] = None
    right_margin_cm: Optional[float] = None


@dataclass
class Page:
    name: str
    footer: str = ""
    setup: PageSetup = field(default_factory=PageSetup)
    frames: list[TextFrame] = field(default_factory=list)
    headings: list[Paragraph] = field(default_factory=list)
    table: Optional[Table] = None
    notes: list[Paragraph] = field(default_factory=list)


@dataclass
class DocumentTree:
    title: str
    subject: str = ""
    author: str = ""
    font_family: str = ""
    pages: list[Page] = field(default_factory=list)


class Renderer(Protocol):
    """Turns a DocumentTree into a concrete artifact (PDF, XLSX, ...)."""

    def render(self, tree: DocumentTree) -> bytes:
        ...
