"""
Block Layout.

Declarative page content for PDF exports. A document is a flat list of
blocks; paginate() places them top-down into fixed-size frames, splitting
text blocks line by line and starting a new page whenever the next block
(or its keep_space reservation) does not fit.

Blocks measure themselves with reportlab font metrics and draw onto a
reportlab canvas, so pagination is decided before anything is drawn.
"""

from dataclasses import dataclass, field, replace

from reportlab.lib import colors
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen.canvas import Canvas

PRIMARY = "#1f2937"
SECONDARY = "#6b7280"
TEXT = "#374151"
MUTED = "#9ca3af"
ACCENT = "#3b82f6"
PANEL = "#f3f4f6"
RULE = "#e5e7eb"

MARKER_RADIUS = 3.5

FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"


@dataclass(frozen=True)
class Fonts:
    """Regular and bold font names registered with reportlab."""

    regular: str = FONT
    bold: str = FONT_BOLD


@dataclass(frozen=True, kw_only=True)
class Block:
    """
    Base block.

    keep_space is the vertical room that must remain on the page before
    the block is placed; headings use it to stay with what follows.
    """

    keep_space: float = 0.0

    def height(self, width: float) -> float:
        raise NotImplementedError

    def split(self, width: float, available: float) -> tuple["Block", "Block"] | None:
        """Split into a part fitting in available and the remainder, or None."""
        return None

    def draw(self, canvas: Canvas, x: float, top: float, width: float) -> None:
        raise NotImplementedError


@dataclass(frozen=True, kw_only=True)
class Spacer(Block):
    size: float

    def height(self, width: float) -> float:
        return self.size

    def draw(self, canvas: Canvas, x: float, top: float, width: float) -> None:
        pass


@dataclass(frozen=True, kw_only=True)
class Divider(Block):
    color: str = RULE
    thickness: float = 1.0
    padding: float = 8.0

    def height(self, width: float) -> float:
        return self.padding * 2 + self.thickness

    def draw(self, canvas: Canvas, x: float, top: float, width: float) -> None:
        y = top - self.padding - self.thickness / 2
        canvas.setStrokeColor(colors.HexColor(self.color))
        canvas.setLineWidth(self.thickness)
        canvas.line(x, y, x + width, y)


@dataclass(frozen=True, kw_only=True)
class Text(Block):
    """
    Wrapped text paragraph.

    Newlines start new lines. marker draws a filled circle left of the
    first line in the given color, inside the indent.
    """

    text: str
    font: str = FONT
    size: float = 10.0
    leading: float = 14.0
    color: str = TEXT
    indent: float = 0.0
    space_before: float = 0.0
    space_after: float = 0.0
    marker: str | None = None

    def lines(self, width: float) -> list[str]:
        wrapped: list[str] = []
        for paragraph in self.text.split("\n"):
            wrapped.extend(
                simpleSplit(paragraph, self.font, self.size, width - self.indent) or [""]
            )
        return wrapped

    def height(self, width: float) -> float:
        return self.space_before + len(self.lines(width)) * self.leading + self.space_after

    def split(self, width: float, available: float) -> tuple["Text", "Text"] | None:
        lines = self.lines(width)
        fitting = int((available - self.space_before) // self.leading)
        if fitting < 1 or fitting >= len(lines):
            return None
        head = replace(self, text="\n".join(lines[:fitting]), space_after=0.0, keep_space=0.0)
        tail = replace(
            self,
            text="\n".join(lines[fitting:]),
            space_before=0.0,
            marker=None,
            keep_space=0.0,
        )
        return head, tail

    def draw(self, canvas: Canvas, x: float, top: float, width: float) -> None:
        baseline = top - self.space_before - self.size
        if self.marker is not None:
            canvas.setFillColor(colors.HexColor(self.marker))
            canvas.circle(
                x + self.indent - MARKER_RADIUS * 3,
                baseline + self.size * 0.35,
                MARKER_RADIUS,
                stroke=0,
                fill=1,
            )
        canvas.setFont(self.font, self.size)
        canvas.setFillColor(colors.HexColor(self.color))
        for line in self.lines(width):
            canvas.drawString(x + self.indent, baseline, line)
            baseline -= self.leading


def Heading(text: str, size: float = 14.0, **kwargs) -> Text:
    """Bold text block that keeps some room for the content after it."""
    kwargs.setdefault("font", FONT_BOLD)
    kwargs.setdefault("color", PRIMARY)
    kwargs.setdefault("leading", size * 1.3)
    kwargs.setdefault("space_before", 6.0)
    kwargs.setdefault("space_after", 4.0)
    kwargs.setdefault("keep_space", size * 5)
    return Text(text=text, size=size, **kwargs)


@dataclass(frozen=True, kw_only=True)
class Banner(Block):
    """Full-width colored header band with a title and subtitle."""

    title: str
    subtitle: str = ""
    size: float = 64.0
    fill: str = ACCENT
    font: str = FONT
    bold_font: str = FONT_BOLD

    def height(self, width: float) -> float:
        return self.size

    def draw(self, canvas: Canvas, x: float, top: float, width: float) -> None:
        canvas.setFillColor(colors.HexColor(self.fill))
        canvas.rect(x, top - self.size, width, self.size, stroke=0, fill=1)
        canvas.setFillColor(colors.white)
        canvas.setFont(self.bold_font, 20)
        canvas.drawString(x + 16, top - 30, self.title)
        if self.subtitle:
            canvas.setFont(self.font, 10)
            canvas.drawString(x + 16, top - 48, self.subtitle)


@dataclass(frozen=True, kw_only=True)
class StatsPanel(Block):
    """Two-column label/value panel on a shaded background."""

    left: list[tuple[str, str]] = field(default_factory=list)
    right: list[tuple[str, str]] = field(default_factory=list)
    row_height: float = 18.0
    padding: float = 12.0
    font: str = FONT
    bold_font: str = FONT_BOLD

    def height(self, width: float) -> float:
        rows = max(len(self.left), len(self.right), 1)
        return rows * self.row_height + self.padding * 2

    def draw(self, canvas: Canvas, x: float, top: float, width: float) -> None:
        canvas.setFillColor(colors.HexColor(PANEL))
        canvas.roundRect(x, top - self.height(width), width, self.height(width), 6, stroke=0, fill=1)
        column = width / 2
        for offset, rows in ((0.0, self.left), (column, self.right)):
            baseline = top - self.padding - 12
            for label, value in rows:
                canvas.setFont(self.font, 10)
                canvas.setFillColor(colors.HexColor(SECONDARY))
                canvas.drawString(x + offset + self.padding, baseline, label)
                canvas.setFont(self.bold_font, 10)
                canvas.setFillColor(colors.HexColor(PRIMARY))
                canvas.drawRightString(x + offset + column - self.padding, baseline, value)
                baseline -= self.row_height


@dataclass(frozen=True)
class Placement:
    block: Block
    top: float


@dataclass
class Page:
    placements: list[Placement] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.placements)


def paginate(blocks: list[Block], width: float, height: float) -> list[Page]:
    """
    Distribute blocks over pages of the given frame size.

    A block is placed when both its height and its keep_space fit in the
    remaining room. Otherwise a splittable block is split at the page end,
    and an unsplittable one moves to the next page. A block taller than an
    empty page is placed there alone and clipped. Spacers at the top of a
    continuation page are dropped. Always returns at least one page.
    """
    pages: list[Page] = []
    current = Page()
    used = 0.0
    pending = list(reversed(blocks))

    while pending:
        block = pending.pop()
        if isinstance(block, Spacer) and not current and pages:
            continue

        available = height - used
        block_height = block.height(width)
        if block_height <= available and min(block.keep_space, height) <= available:
            current.placements.append(Placement(block, used))
            used += block_height
            continue

        parts = block.split(width, available) if block_height > available else None
        if parts is not None:
            head, tail = parts
            current.placements.append(Placement(head, used))
            pending.append(tail)
        elif current:
            pending.append(block)
        else:
            current.placements.append(Placement(block, used))

        pages.append(current)
        current = Page()
        used = 0.0

    if current or not pages:
        pages.append(current)
    return pages

