"""
Unit Tests for the PDF Renderer.

Rendering runs for real with reportlab; only the footer hook is
patched where page numbering is inspected.
"""

import base64
from datetime import date, datetime
from pathlib import Path
from unittest.mock import patch

import pytest
import reportlab
from reportlab.pdfbase import pdfmetrics

from projecthub.backend.core.config_schema import PdfFontsSchema
from projecthub.backend.export.document import build_export_data
from projecthub.backend.export.layout import Banner, Fonts, StatsPanel, Text
from projecthub.backend.export.pdf import (
    PRIORITY_COLORS,
    build_blocks,
    register_fonts,
    render_pdf,
    to_data_uri,
    unsupported_characters,
)
from projecthub.backend.models.task import Priority
from projecthub.backend.schemas.export import PDF_DATA_URI_PREFIX, ExportFormat

GENERATED_AT = datetime(2024, 3, 5, 14, 30)
REPORTLAB_FONTS = Path(reportlab.__file__).parent / "fonts"


def _texts(blocks) -> list[str]:
    return [b.text for b in blocks if isinstance(b, Text)]


class TestBuildBlocks:
    """Tests for document structure."""

    def test_starts_with_banner_and_title(self, project_response, export_config):
        data = build_export_data(project_response(), [], {}, ExportFormat.PDF, export_config)

        blocks = build_blocks(data, export_config)

        assert isinstance(blocks[0], Banner)
        assert blocks[0].title == export_config.brand
        assert "Q1 Launch Plan" in _texts(blocks)
        assert "Ship the new site" in _texts(blocks)

    def test_stats_panel_columns(self, project_response, task_response, export_config):
        tasks = [task_response("t1", completed=True), task_response("t2"), task_response("t3")]
        data = build_export_data(project_response(), tasks, {}, ExportFormat.PDF, export_config)

        panel = next(b for b in build_blocks(data, export_config) if isinstance(b, StatsPanel))

        assert panel.left == [("Total Tasks", "3"), ("Total Notes", "0")]
        assert panel.right == [("Completed", "1 of 3"), ("Progress", "33%")]

    def test_active_section_precedes_completed(self, project_response, task_response, export_config):
        tasks = [
            task_response("done", completed=True, name="Finished work"),
            task_response("open", name="Open work", priority=Priority.HIGH),
        ]
        data = build_export_data(project_response(), tasks, {}, ExportFormat.PDF, export_config)

        texts = _texts(build_blocks(data, export_config))

        assert texts.index("Active Tasks (1)") < texts.index("Open work")
        assert texts.index("Open work") < texts.index("Completed Tasks (1)")
        assert texts.index("Completed Tasks (1)") < texts.index("Finished work")

    def test_task_marker_uses_priority_color(self, project_response, task_response, export_config):
        task = task_response("t1", name="Urgent", priority=Priority.HIGH)
        data = build_export_data(project_response(), [task], {}, ExportFormat.PDF, export_config)

        block = next(b for b in build_blocks(data, export_config) if isinstance(b, Text) and b.text == "Urgent")

        assert block.marker == PRIORITY_COLORS[Priority.HIGH] == "#ef4444"

    def test_due_date_callout(self, project_response, export_config):
        project = project_response(due_date=date(2024, 4, 1))
        data = build_export_data(project, [], {}, ExportFormat.PDF, export_config)

        assert "Due Date: April 1, 2024" in _texts(build_blocks(data, export_config))

    def test_empty_project_message(self, project_response, export_config):
        data = build_export_data(project_response(), [], {}, ExportFormat.PDF, export_config)

        texts = _texts(build_blocks(data, export_config))

        assert "No tasks in this project yet." in texts
        assert not any(t.startswith("Active Tasks") for t in texts)

    def test_notes_render_as_indented_sub_list(self, project_response, task_response, note_response, export_config):
        notes = {"t1": [note_response("n1", "t1", content="- call vendor")]}
        data = build_export_data(project_response(), [task_response("t1")], notes, ExportFormat.PDF, export_config)

        block = next(
            b for b in build_blocks(data, export_config) if isinstance(b, Text) and b.text == "• call vendor"
        )

        assert block.indent > 18


class TestRenderPdf:
    """Tests for rendering."""

    def test_produces_pdf_bytes(self, project_response, task_response, note_response, export_config):
        notes = {"t1": [note_response("n1", "t1")]}
        data = build_export_data(project_response(), [task_response("t1")], notes, ExportFormat.PDF, export_config)

        content = render_pdf(data, export_config, GENERATED_AT)

        assert content.startswith(b"%PDF-")

    def test_every_page_gets_numbered_footer(self, project_response, task_response, note_response, export_config):
        long_note = "\n".join(f"- point {i}" for i in range(40))
        tasks = [task_response(f"t{i}") for i in range(6)]
        notes = {t.id: [note_response(f"n-{t.id}", t.id, content=long_note)] for t in tasks}
        data = build_export_data(project_response(), tasks, notes, ExportFormat.PDF, export_config)

        with patch("projecthub.backend.export.pdf._draw_footer") as footer:
            render_pdf(data, export_config, GENERATED_AT)

        calls = [c.args for c in footer.call_args_list]
        total = len(calls)
        assert total > 1
        assert [c[4] for c in calls] == list(range(1, total + 1))
        assert all(c[5] == total for c in calls)
        assert all(c[3] == "Mar 5, 2024, 02:30 PM" for c in calls)


def test_data_uri_round_trip():
    uri = to_data_uri(b"%PDF-1.4 test")
    assert uri.startswith(PDF_DATA_URI_PREFIX)
    assert base64.b64decode(uri[len(PDF_DATA_URI_PREFIX):]) == b"%PDF-1.4 test"


@pytest.fixture
def ttf_export_config(export_config):
    """Export settings pointing at the Vera TrueType fonts shipped with reportlab."""
    fonts = PdfFontsSchema(
        regular=str(REPORTLAB_FONTS / "Vera.ttf"),
        bold=str(REPORTLAB_FONTS / "VeraBd.ttf"),
    )
    pdf = export_config.pdf.model_copy(update={"fonts": fonts})
    return export_config.model_copy(update={"pdf": pdf})


class TestFonts:
    """Tests for font registration and coverage warnings."""

    def test_builtin_fonts_without_config(self):
        assert register_fonts(None) == Fonts(regular="Helvetica", bold="Helvetica-Bold")

    def test_registers_configured_truetype_fonts(self, ttf_export_config):
        fonts = register_fonts(ttf_export_config.pdf.fonts)

        assert fonts == Fonts(regular="Vera", bold="VeraBd")
        assert {"Vera", "VeraBd"} <= set(pdfmetrics.getRegisteredFontNames())

    def test_blocks_use_registered_fonts(self, project_response, task_response, note_response, ttf_export_config):
        notes = {"t1": [note_response("n1", "t1")]}
        data = build_export_data(
            project_response(), [task_response("t1")], notes, ExportFormat.PDF, ttf_export_config
        )
        fonts = register_fonts(ttf_export_config.pdf.fonts)

        blocks = build_blocks(data, ttf_export_config, fonts)

        assert {b.font for b in blocks if isinstance(b, Text)} == {"Vera", "VeraBd"}
        banner = blocks[0]
        assert (banner.font, banner.bold_font) == ("Vera", "VeraBd")

    def test_latin1_text_is_supported(self, project_response, export_config):
        data = build_export_data(
            project_response(name="Café Relaunch"), [], {}, ExportFormat.PDF, export_config
        )
        assert unsupported_characters(data) == set()

    def test_warns_about_characters_builtin_font_cannot_draw(
        self, project_response, task_response, export_config
    ):
        tasks = [task_response("t1", name="Launch 🚀")]
        data = build_export_data(
            project_response(name="Café 日本"), tasks, {}, ExportFormat.PDF, export_config
        )

        with patch("projecthub.backend.export.pdf.logger") as mock_logger:
            content = render_pdf(data, export_config, GENERATED_AT)

        assert content.startswith(b"%PDF-")
        mock_logger.warning.assert_called_once()
        characters = mock_logger.warning.call_args.kwargs["extra"]["characters"]
        assert set(characters) == {"日", "本", "🚀"}

    def test_no_warning_with_truetype_fonts(self, project_response, ttf_export_config):
        data = build_export_data(
            project_response(name="Café Relaunch"), [], {}, ExportFormat.PDF, ttf_export_config
        )

        with patch("projecthub.backend.export.pdf.logger") as mock_logger:
            content = render_pdf(data, ttf_export_config, GENERATED_AT)

        assert content.startswith(b"%PDF-")
        mock_logger.warning.assert_not_called()
