"""Export document assembly and rendering (JSON and PDF)."""

from projecthub.backend.export.document import (
    build_export_data,
    completion_percentage,
    export_filename,
    export_stats,
    format_note_content,
    render_json,
    validate_export_data,
)
from projecthub.backend.export.pdf import render_pdf, to_data_uri

__all__ = [
    "build_export_data",
    "completion_percentage",
    "export_filename",
    "export_stats",
    "format_note_content",
    "render_json",
    "render_pdf",
    "to_data_uri",
    "validate_export_data",
]
