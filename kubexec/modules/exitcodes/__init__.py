"""
Exit Codes Module - Black Box Interface

Purpose: Translate remote process exit statuses into readable classifications
Interface: classify(), describe(), ExitCode
Hidden: Description table, sentinel handling

Can be replaced with a richer taxonomy without affecting the executor.
"""

from .exitcodes import EXIT_CODE_DESCRIPTIONS, ExitCode, as_exit_code, classify, describe

__all__ = ["ExitCode", "EXIT_CODE_DESCRIPTIONS", "as_exit_code", "classify", "describe"]
