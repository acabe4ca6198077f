"""
API Module - Black Box Interface

Purpose: HTTP request/response models
Interface: REST API payloads
Hidden: Validation rules, result conversion

The API module only describes payloads - it contains no business logic.
"""

from .models import (
    CheckResponse,
    ExecRequest,
    FileContentResponse,
    FileRequest,
    UniqueImagesResponse,
    UniquePodsResponse,
    UtilityRequest,
)

__all__ = [
    "CheckResponse",
    "ExecRequest",
    "FileContentResponse",
    "FileRequest",
    "UniqueImagesResponse",
    "UniquePodsResponse",
    "UtilityRequest",
]
