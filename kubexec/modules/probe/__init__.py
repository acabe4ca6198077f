"""
Probe Module - Black Box Interface

Purpose: Read and check files inside containers regardless of available tooling
Interface: read_file(), is_readable(), exists(), has_utility()
Hidden: Fallback command chains, permission parsing

Can be extended with more strategies without affecting callers.
"""

from .file_probe import FileProbe, parse_octal_permissions

__all__ = ["FileProbe", "parse_octal_permissions"]
