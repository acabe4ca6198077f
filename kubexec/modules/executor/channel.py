"""
Remote exec channel: the transport underneath the execution gateway.

A channel runs one command inside one container over a single
multiplexed stream and reports how it ended:

- returns normally when the process exited 0
- raises CodeExitError for a non-zero exit
- raises DeadlineExceeded / ExecCancelled when the context ends first
- raises anything else for transport failures
"""

import logging
from typing import IO, Optional, Protocol, Sequence, TextIO, Union

import yaml
from kubernetes.client import CoreV1Api
from kubernetes.stream import stream as k8s_stream
from kubernetes.stream.ws_client import ERROR_CHANNEL, STDIN_CHANNEL

from kubexec.errors import CodeExitError, ExecTransportError

from .context import ExecContext

logger = logging.getLogger("kubexec.executor.channel")

StdinSource = Union[str, bytes, IO]


class RemoteExecChannel(Protocol):
    """Protocol for remote exec transports."""

    def stream(
        self,
        ctx: ExecContext,
        pod: str,
        container: str,
        command: Sequence[str],
        stdin: Optional[StdinSource],
        stdout: TextIO,
        stderr: TextIO,
    ) -> None:
        """Run command and copy its output into stdout/stderr."""
        ...


def read_stdin(source: Optional[StdinSource]) -> str:
    """Materialize a stdin source as text."""
    if source is None:
        return ""
    if hasattr(source, "read"):
        source = source.read()
    if isinstance(source, bytes):
        return source.decode("utf-8", errors="replace")
    return source


def raise_for_status(raw_status: str) -> None:
    """
    Interpret the status document sent on the exec error channel.

    Success returns; a NonZeroExitCode status raises CodeExitError; any
    other failure raises ExecTransportError. The server always sends a
    status before closing, so a missing one means the stream was cut.
    """
    if not raw_status or not raw_status.strip():
        raise ExecTransportError("exec stream closed without status")

    try:
        status = yaml.safe_load(raw_status)
    except yaml.YAMLError:
        raise ExecTransportError(raw_status.strip())

    if not isinstance(status, dict):
        raise ExecTransportError(raw_status.strip())

    if status.get("status") == "Success":
        return

    message = status.get("message") or raw_status.strip()
    if status.get("reason") == "NonZeroExitCode":
        causes = (status.get("details") or {}).get("causes") or []
        for cause in causes:
            if cause.get("reason") != "ExitCode":
                continue
            try:
                code = int(cause.get("message", ""))
            except ValueError:
                raise ExecTransportError(f"invalid exit code in status: {cause.get('message')!r}")
            raise CodeExitError(code, message)
        raise ExecTransportError(f"exit code not found in status: {message}")

    raise ExecTransportError(message)


class KubernetesExecChannel:
    """Exec channel over the Kubernetes pods/exec websocket subresource."""

    def __init__(self, core_v1: CoreV1Api, namespace: str, poll_interval: float = 0.1):
        """
        Initialize channel.

        Args:
            core_v1: Configured CoreV1Api client
            namespace: Namespace the target pods live in
            poll_interval: Max seconds to block per websocket read
        """
        self.core_v1 = core_v1
        self.namespace = namespace
        self.poll_interval = poll_interval

    def stream(
        self,
        ctx: ExecContext,
        pod: str,
        container: str,
        command: Sequence[str],
        stdin: Optional[StdinSource],
        stdout: TextIO,
        stderr: TextIO,
    ) -> None:
        ctx.raise_if_done()

        resp = k8s_stream(
            self.core_v1.connect_get_namespaced_pod_exec,
            pod,
            self.namespace,
            container=container,
            command=list(command),
            stdin=stdin is not None,
            stdout=True,
            stderr=True,
            tty=False,
            _preload_content=False,
        )

        try:
            # Opening the stream has no deadline of its own
            ctx.raise_if_done()

            if stdin is not None:
                data = read_stdin(stdin)
                if data:
                    resp.write_stdin(data)
                resp.close_channel(STDIN_CHANNEL)

            while resp.is_open():
                ctx.raise_if_done()
                resp.update(timeout=self._poll_timeout(ctx))
                self._drain(resp, stdout, stderr)

            self._drain(resp, stdout, stderr)
            raw_status = resp.read_channel(ERROR_CHANNEL)
        finally:
            resp.close()

        raise_for_status(raw_status)

    def _poll_timeout(self, ctx: ExecContext) -> float:
        remaining = ctx.remaining()
        if remaining is None:
            return self.poll_interval
        return min(self.poll_interval, remaining)

    @staticmethod
    def _drain(resp, stdout: TextIO, stderr: TextIO) -> None:
        """Move buffered channel data into the capture buffers."""
        if resp.peek_stdout():
            stdout.write(resp.read_stdout())
        if resp.peek_stderr():
            stderr.write(resp.read_stderr())
