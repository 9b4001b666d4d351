"""
PDF Export Renderer.

Turns an ExportData tree into layout blocks, paginates them and draws
the pages with reportlab. Footers are drawn after pagination so every
page can show its total page count.
"""

import base64
import io
from datetime import datetime
from functools import lru_cache
from pathlib import Path

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, LETTER
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen.canvas import Canvas

from projecthub.backend.core.config import find_project_root
from projecthub.backend.core.config_schema import ExportSchema, PdfFontsSchema
from projecthub.backend.core.dates import format_timestamp
from projecthub.backend.core.logging import get_logger
from projecthub.backend.export.layout import (
    ACCENT,
    MUTED,
    RULE,
    SECONDARY,
    Banner,
    Block,
    Divider,
    Fonts,
    Heading,
    Page,
    Spacer,
    StatsPanel,
    Text,
    paginate,
)
from projecthub.backend.models.task import Priority
from projecthub.backend.schemas.export import PDF_DATA_URI_PREFIX, ExportData, ExportTask

logger = get_logger(__name__)

PAGE_SIZES = {"A4": A4, "LETTER": LETTER}

PRIORITY_COLORS = {
    Priority.HIGH: "#ef4444",
    Priority.MEDIUM: "#f59e0b",
    Priority.LOW: "#10b981",
}

# Encoding of the built-in Type1 fonts; other characters render as blanks.
BUILTIN_FONT_ENCODING = "cp1252"


@lru_cache
def _register_ttf(path: str) -> str:
    """Register a TrueType file once, named after the file, and return that name."""
    name = Path(path).stem
    pdfmetrics.registerFont(TTFont(name, path))
    return name


def _font_path(configured: str) -> str:
    path = Path(configured)
    if not path.is_absolute():
        path = find_project_root() / path
    return str(path)


def register_fonts(fonts_config: PdfFontsSchema | None) -> Fonts:
    """
    Register the configured TrueType fonts, or fall back to Helvetica.

    Raises:
        reportlab.pdfbase.ttfonts.TTFError: If a font file is missing or unreadable
    """
    if fonts_config is None:
        return Fonts()
    return Fonts(
        regular=_register_ttf(_font_path(fonts_config.regular)),
        bold=_register_ttf(_font_path(fonts_config.bold)),
    )


def unsupported_characters(data: ExportData) -> set[str]:
    """Characters in user text that the built-in fonts cannot draw."""
    project = data.project
    texts = [project.name, project.description or ""]
    for task in project.tasks:
        texts.append(task.name)
        for note in task.notes:
            texts.extend((note.title or "", note.formatted_content))
    missing = set()
    for text in texts:
        for char in text:
            try:
                char.encode(BUILTIN_FONT_ENCODING)
            except UnicodeEncodeError:
                missing.add(char)
    return missing


def _task_blocks(task: ExportTask, fonts: Fonts) -> list[Block]:
    details = f"{task.priority.value} priority · {task.status}"
    if task.formatted_due_date:
        details += f" · Due {task.formatted_due_date}"

    blocks: list[Block] = [
        Text(
            text=task.name,
            font=fonts.bold,
            size=11,
            leading=15,
            indent=18,
            space_before=4,
            marker=PRIORITY_COLORS[task.priority],
            keep_space=60,
        ),
        Text(
            text=details,
            font=fonts.regular,
            size=9,
            leading=12,
            color=SECONDARY,
            indent=18,
            space_after=2,
        ),
    ]
    for note in task.notes:
        if note.title:
            blocks.append(
                Text(text=note.title, font=fonts.bold, size=9, leading=12, indent=40, space_before=2)
            )
        blocks.append(
            Text(
                text=note.formatted_content,
                font=fonts.regular,
                size=9,
                leading=12,
                indent=40,
                marker=None if note.title else MUTED,
                space_before=0 if note.title else 2,
            )
        )
        blocks.append(
            Text(text=note.timestamp, font=fonts.regular, size=8, leading=11, color=MUTED, indent=40)
        )
    blocks.append(Spacer(size=6))
    return blocks


def _section(title: str, tasks: list[ExportTask], fonts: Fonts) -> list[Block]:
    if not tasks:
        return []
    blocks: list[Block] = [Heading(f"{title} ({len(tasks)})", size=14, font=fonts.bold, space_before=10)]
    for task in tasks:
        blocks.extend(_task_blocks(task, fonts))
    return blocks


def build_blocks(data: ExportData, config: ExportSchema, fonts: Fonts | None = None) -> list[Block]:
    """
    Lay out an export as a flat block list.

    Order: banner, title, overview, statistics, due date, then active
    tasks followed by completed tasks.
    """
    fonts = fonts or Fonts()
    project = data.project
    blocks: list[Block] = [
        Banner(
            title=config.brand,
            subtitle=config.tagline,
            size=config.pdf.header_height,
            font=fonts.regular,
            bold_font=fonts.bold,
        ),
        Spacer(size=18),
        Heading(project.name, size=22, font=fonts.bold, space_before=0, keep_space=0),
        Text(
            text=f"Exported {data.metadata.export_date}",
            font=fonts.regular,
            size=9,
            color=MUTED,
            space_after=8,
        ),
    ]

    if project.description:
        blocks.append(Heading("Project Overview", size=13, font=fonts.bold))
        blocks.append(Text(text=project.description, font=fonts.regular, space_after=8))

    blocks.append(
        StatsPanel(
            left=[
                ("Total Tasks", str(project.tasks_count)),
                ("Total Notes", str(project.total_notes_count)),
            ],
            right=[
                ("Completed", f"{project.completed_tasks_count} of {project.tasks_count}"),
                ("Progress", f"{project.completion_percentage}%"),
            ],
            font=fonts.regular,
            bold_font=fonts.bold,
        )
    )

    if project.formatted_due_date:
        blocks.append(
            Text(
                text=f"Due Date: {project.formatted_due_date}",
                font=fonts.bold,
                size=11,
                color=ACCENT,
                space_before=10,
            )
        )

    blocks.append(Divider())

    if not project.tasks:
        blocks.append(Text(text="No tasks in this project yet.", font=fonts.regular, color=MUTED))
        return blocks

    blocks.extend(_section("Active Tasks", [t for t in project.tasks if not t.completed], fonts))
    blocks.extend(_section("Completed Tasks", [t for t in project.tasks if t.completed], fonts))
    return blocks


def _draw_footer(
    canvas: Canvas,
    config: ExportSchema,
    fonts: Fonts,
    generated: str,
    number: int,
    total: int,
    page_width: float,
) -> None:
    margin = config.pdf.margin
    rule_y = margin + config.pdf.footer_height * 0.6
    text_y = margin + config.pdf.footer_height * 0.25
    canvas.setStrokeColor(colors.HexColor(RULE))
    canvas.setLineWidth(0.5)
    canvas.line(margin, rule_y, page_width - margin, rule_y)
    canvas.setFont(fonts.regular, 8)
    canvas.setFillColor(colors.HexColor(MUTED))
    canvas.drawString(margin, text_y, f"Generated by {config.brand} • {generated}")
    canvas.drawRightString(page_width - margin, text_y, f"Page {number} of {total}")


def render_pdf(data: ExportData, config: ExportSchema, generated_at: datetime) -> bytes:
    """
    Render an export to PDF bytes.

    Args:
        data: Validated export tree
        config: Branding and page geometry
        generated_at: Timestamp shown in every footer

    Returns:
        The PDF file content
    """
    page_width, page_height = PAGE_SIZES.get(config.pdf.page_size.upper(), A4)
    margin = config.pdf.margin
    frame_width = page_width - 2 * margin
    frame_height = page_height - 2 * margin - config.pdf.footer_height
    frame_top = page_height - margin

    fonts = register_fonts(config.pdf.fonts)
    if config.pdf.fonts is None:
        missing = unsupported_characters(data)
        if missing:
            logger.warning(
                "Export text has characters the built-in PDF font cannot draw",
                extra={"project_id": data.project.id, "characters": "".join(sorted(missing))},
            )

    pages: list[Page] = paginate(build_blocks(data, config, fonts), frame_width, frame_height)
    generated = format_timestamp(generated_at)

    buffer = io.BytesIO()
    canvas = Canvas(buffer, pagesize=(page_width, page_height))
    canvas.setTitle(f"{data.project.name} - {config.brand} Export")
    canvas.setAuthor(config.brand)

    for number, page in enumerate(pages, start=1):
        for placement in page.placements:
            placement.block.draw(canvas, margin, frame_top - placement.top, frame_width)
        _draw_footer(canvas, config, fonts, generated, number, len(pages), page_width)
        canvas.showPage()
    canvas.save()

    logger.debug(
        "PDF rendered",
        extra={"project_id": data.project.id, "pages": len(pages)},
    )
    return buffer.getvalue()


def to_data_uri(content: bytes) -> str:
    return PDF_DATA_URI_PREFIX + base64.b64encode(content).decode("ascii")
