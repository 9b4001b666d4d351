# Pydantic schemas package
from projecthub.backend.schemas.base import (
    ApiResponse,
    ErrorDetail,
    ResponseMetadata,
)

__all__ = [
    "ApiResponse",
    "ErrorDetail",
    "ResponseMetadata",
]
