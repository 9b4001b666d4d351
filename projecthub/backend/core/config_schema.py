"""
Configuration Schemas.

Pydantic models defining the expected structure of each YAML config file.
Used by AppConfig to validate configuration at load time. If a YAML file
has missing keys, wrong types, or unknown fields, a clear ValidationError
is raised at startup instead of a cryptic KeyError deep in application code.

Each top-level class corresponds to one file in config/settings/:
    ApplicationSchema  → application.yaml
    DatabaseSchema     → database.yaml
    LoggingSchema      → logging.yaml
    SecuritySchema     → security.yaml
    ExportSchema       → export.yaml
"""

from pydantic import BaseModel, ConfigDict


class _StrictBase(BaseModel):
    """Base with extra='forbid' so unknown YAML keys are caught immediately."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# application.yaml
# =============================================================================


class ApplicationSchema(_StrictBase):
    name: str
    version: str
    description: str
    environment: str
    debug: bool


# =============================================================================
# database.yaml
# =============================================================================


class DatabaseSchema(_StrictBase):
    pool_size: int
    max_overflow: int
    pool_timeout: int
    pool_recycle: int
    echo: bool


# =============================================================================
# logging.yaml
# =============================================================================


class ConsoleHandlerSchema(_StrictBase):
    enabled: bool


class FileHandlerSchema(_StrictBase):
    enabled: bool
    path: str
    max_bytes: int
    backup_count: int


class HandlersSchema(_StrictBase):
    console: ConsoleHandlerSchema
    file: FileHandlerSchema


class LoggingSchema(_StrictBase):
    level: str
    format: str
    handlers: HandlersSchema


# =============================================================================
# security.yaml
# =============================================================================


class JwtSchema(_StrictBase):
    algorithm: str
    audience: str


class StoreKeySchema(_StrictBase):
    prefix: str
    min_length: int


class SecuritySchema(_StrictBase):
    jwt: JwtSchema
    store_key: StoreKeySchema


# =============================================================================
# export.yaml
# =============================================================================


class PdfFontsSchema(_StrictBase):
    regular: str
    bold: str


class PdfSchema(_StrictBase):
    page_size: str
    margin: float
    header_height: float
    footer_height: float
    fonts: PdfFontsSchema | None = None


class ExportSchema(_StrictBase):
    app_name: str
    brand: str
    tagline: str
    schema_version: str
    pdf: PdfSchema
