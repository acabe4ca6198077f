"""
Executor Module - Black Box Interface

Purpose: Run commands inside pod containers and classify the outcome
Interface: ExecutionGateway.execute(), execute_with_context(), ExecutionOutcome
Hidden: Websocket exec streaming, status channel parsing, deadline handling

Can be replaced with different transports by supplying another RemoteExecChannel.
"""

from .channel import KubernetesExecChannel, RemoteExecChannel
from .context import ExecContext
from .gateway import ExecutionGateway
from .outcome import ExecutionOutcome

__all__ = [
    "ExecContext",
    "ExecutionGateway",
    "ExecutionOutcome",
    "KubernetesExecChannel",
    "RemoteExecChannel",
]
