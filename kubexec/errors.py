"""
Exception types shared by kubexec modules.

Remote command failures are reported as classified outcomes, not raised to
callers of the gateway. These exceptions travel between the transport
adapters and the core, and out of the discovery/probe modules when a
result cannot be produced at all.
"""

from typing import Optional


class KubexecError(Exception):
    """Base class for all kubexec errors."""


class CodeExitError(KubexecError):
    """The remote process ran to completion with a non-zero exit code."""

    def __init__(self, code: int, message: Optional[str] = None):
        self.code = code
        super().__init__(message or f"command terminated with non-zero exit code: {code}")


class ExecTransportError(KubexecError):
    """The exec stream reported a failure that is not a process exit."""


class DeadlineExceeded(KubexecError):
    """The execution context deadline passed before the stream finished."""

    def __init__(self, message: str = "context deadline exceeded"):
        super().__init__(message)


class ExecCancelled(KubexecError):
    """The execution context was cancelled by its owner."""

    def __init__(self, message: str = "context canceled"):
        super().__init__(message)


class ResourceListingError(KubexecError):
    """Listing pods or replica groups failed."""

    def __init__(self, kind: str, namespace: str, reason: str):
        self.kind = kind
        self.namespace = namespace
        self.reason = reason
        super().__init__(f"failed to list {kind} in namespace {namespace}: {reason}")


class FileReadError(KubexecError):
    """Every read strategy failed for a file inside a container."""

    def __init__(self, path: str, outcome):
        self.path = path
        self.outcome = outcome
        detail = "\n".join(line for line in outcome.error if line) if outcome else ""
        super().__init__(f"unable to read {path}: {detail or 'all read strategies failed'}")
