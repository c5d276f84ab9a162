"""Rendered document and cell map types.

A RenderedDocument is a sequence of lines made of styled spans. A CellMap
records, for one rendered result set, where its header, row-number gutter,
columns and rows landed in document coordinates (0-based line index,
0-based character column). All ranges are half-open.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Span:
    text: str
    style: str | None = None


Line = tuple[Span, ...]


@dataclass(frozen=True)
class LineRange:
    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class ColumnRange:
    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class ColumnSpan:
    ordinal: int
    col_range: ColumnRange


@dataclass(frozen=True)
class RowSpan:
    ordinal: int
    line_range: LineRange


@dataclass(frozen=True)
class CellMap:
    result_set_index: int
    table_span: LineRange
    header_span: LineRange
    gutter_span: ColumnRange | None
    columns: tuple[ColumnSpan, ...]
    rows: tuple[RowSpan, ...]


@dataclass(frozen=True)
class RenderedDocument:
    lines: tuple[Line, ...] = ()

    def __len__(self) -> int:
        return len(self.lines)

    def line_text(self, index: int) -> str:
        return "".join(span.text for span in self.lines[index])

    def text_lines(self) -> list[str]:
        return [self.line_text(i) for i in range(len(self.lines))]

    def text(self) -> str:
        return "\n".join(self.text_lines())


@dataclass
class DocumentBuilder:
    """Accumulates styled lines for one render call."""

    _lines: list[Line] = field(default_factory=list)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def line(self, *spans: Span) -> None:
        self._lines.append(tuple(spans))

    def styled(self, text: str, style: str | None) -> None:
        self.line(Span(text, style))

    def blank(self) -> None:
        self._lines.append(())

    def build(self) -> RenderedDocument:
        return RenderedDocument(tuple(self._lines))
