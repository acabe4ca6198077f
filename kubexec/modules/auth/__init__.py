"""
Auth Module - Black Box Interface

Purpose: Authenticate HTTP clients of the kubexec service
Interface: ApiKeyAuth.verify_api_key()
Hidden: Key parsing, constant-time comparison
"""

from .auth import ApiKeyAuth

__all__ = ["ApiKeyAuth"]
