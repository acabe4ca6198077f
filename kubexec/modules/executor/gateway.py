import io
import logging
from typing import Optional, Sequence

from kubexec.errors import CodeExitError, DeadlineExceeded
from kubexec.modules.exitcodes import ExitCode, classify

from .channel import RemoteExecChannel, StdinSource
from .context import ExecContext
from .outcome import ExecutionOutcome

logger = logging.getLogger("kubexec.executor")


class ExecutionGateway:
    """
    Runs commands inside containers and classifies how they ended.

    Every invocation opens exactly one stream through the channel and
    produces exactly one ExecutionOutcome. Nothing is retried; a failed
    attempt is reported as-is.
    """

    DEFAULT_TIMEOUT = 30.0

    def __init__(self, channel: RemoteExecChannel, default_timeout: float = DEFAULT_TIMEOUT):
        """
        Initialize gateway.

        Args:
            channel: Remote exec transport
            default_timeout: Seconds allowed per execute() call when none is given
        """
        self.channel = channel
        self.default_timeout = default_timeout

    def execute(
        self,
        pod: str,
        container: str,
        command: Sequence[str],
        stdin: Optional[StdinSource] = None,
        timeout: Optional[float] = None,
    ) -> ExecutionOutcome:
        """
        Execute a command under a deadline owned by this call.

        Args:
            pod: Target pod name
            container: Target container name
            command: Argument vector
            stdin: Optional text, bytes or file-like object fed to the command
            timeout: Seconds before the execution is abandoned

        Returns:
            ExecutionOutcome; ret_code is EXECUTION_TIMEOUT when the deadline passed
        """
        seconds = self.default_timeout if timeout is None else timeout
        with ExecContext.with_timeout(seconds) as ctx:
            return self._run(ctx, pod, container, command, stdin)

    def execute_with_context(
        self,
        ctx: ExecContext,
        pod: str,
        container: str,
        command: Sequence[str],
        stdin: Optional[StdinSource] = None,
    ) -> ExecutionOutcome:
        """
        Execute a command governed by a caller-supplied context.

        Cancelling ctx aborts the stream; its deadline bounds the call.
        """
        return self._run(ctx, pod, container, command, stdin)

    def _run(
        self,
        ctx: ExecContext,
        pod: str,
        container: str,
        command: Sequence[str],
        stdin: Optional[StdinSource],
    ) -> ExecutionOutcome:
        if not command:
            return ExecutionOutcome.from_output(
                pod,
                container,
                ExitCode.INTERNAL_APP_ERROR,
                error="command must contain at least one argument",
            )

        stdout, stderr = io.StringIO(), io.StringIO()
        error_message = ""

        logger.debug(f"Executing {list(command)} in {pod}/{container}")

        try:
            self.channel.stream(ctx, pod, container, list(command), stdin, stdout, stderr)
            ret_code = ExitCode.SUCCESS
        except DeadlineExceeded as e:
            ret_code = ExitCode.EXECUTION_TIMEOUT
            error_message = str(e)
            logger.warning(f"Execution in {pod}/{container} timed out")
        except CodeExitError as e:
            ret_code, description = classify(e)
            error_message = str(e)
            logger.debug(f"Command in {pod}/{container} exited {e.code}: {description}")
        except Exception as e:
            ret_code = ExitCode.INTERNAL_APP_ERROR
            error_message = str(e)
            logger.warning(f"Execution in {pod}/{container} failed: {e}")

        return ExecutionOutcome.from_output(
            pod,
            container,
            ret_code,
            error=error_message,
            stdout=stdout.getvalue(),
            stderr=stderr.getvalue(),
        )
