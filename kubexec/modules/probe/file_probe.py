import logging
import shlex
from typing import List, Optional, Sequence

from kubexec.errors import FileReadError
from kubexec.modules.executor import ExecutionGateway, ExecutionOutcome
from kubexec.modules.exitcodes import ExitCode

logger = logging.getLogger("kubexec.probe")

READ_BIT = 4

# Results that mean the utility itself is unusable in the container
UTILITY_MISSING_CODES = {
    ExitCode.COMMAND_NOT_FOUND,
    ExitCode.COMMAND_CANNOT_EXECUTE,
    ExitCode.INTERNAL_APP_ERROR,
}


def read_commands(path: str) -> List[List[str]]:
    """Read strategies, most common utility first."""
    return [
        ["cat", path],
        ["sed", "", path],
        ["tail", "-n", "+1", path],
        ["sh", "-c", f'while IFS= read -r line; do echo "$line"; done < {shlex.quote(path)}'],
    ]


def parse_octal_permissions(text: str) -> Optional[bool]:
    """
    Decide readability from `stat -c %a` output.

    Returns True when any of owner/group/other has the read bit, False when
    none does, and None when the text is not a 3 or 4 digit octal mode.
    """
    perm = text.strip()
    if len(perm) not in (3, 4) or any(c not in "01234567" for c in perm):
        return None
    if len(perm) == 4:
        perm = perm[1:]
    return any(int(digit) & READ_BIT for digit in perm)


class FileProbe:
    """
    File access inside containers with unknown tooling.

    Minimal images often lack cat, stat, or both. Each operation walks a
    chain of commands and stops at the first one that exits 0. Attempts
    run one after another, each with its own deadline.
    """

    DEFAULT_ATTEMPT_TIMEOUT = 5.0

    def __init__(self, gateway: ExecutionGateway, attempt_timeout: float = DEFAULT_ATTEMPT_TIMEOUT):
        """
        Initialize file probe.

        Args:
            gateway: Gateway used for every attempt
            attempt_timeout: Seconds allowed per attempt
        """
        self.gateway = gateway
        self.attempt_timeout = attempt_timeout

    def read_file(self, pod: str, container: str, path: str) -> str:
        """
        Read a file's content.

        Returns:
            Stdout of the first successful strategy, verbatim

        Raises:
            FileReadError: Every strategy failed; carries the last outcome
        """
        outcome = self._first_success(pod, container, read_commands(path))
        if not outcome.succeeded:
            raise FileReadError(path, outcome)
        return outcome.stdout_text

    def is_readable(self, pod: str, container: str, path: str) -> bool:
        """Check whether anyone has read permission on path."""
        outcome = self._attempt(pod, container, ["stat", "-c", "%a", path])
        if outcome.succeeded:
            verdict = parse_octal_permissions(outcome.stdout_text)
            if verdict is None:
                logger.debug(f"Unparseable permissions {outcome.stdout_text!r} for {path}")
                return False
            return verdict

        outcome = self._attempt(pod, container, ["sh", "-c", f"test -r {shlex.quote(path)}"])
        return outcome.succeeded

    def exists(self, pod: str, container: str, path: str) -> bool:
        """Check whether path exists."""
        return self._first_success(
            pod,
            container,
            [
                ["stat", path],
                ["sh", "-c", f"[ -f {shlex.quote(path)} ]"],
            ],
        ).succeeded

    def has_utility(self, pod: str, container: str, util: str) -> bool:
        """
        Check whether a utility can be started in the container.

        The utility runs without arguments; any exit other than
        "not found", "cannot execute" or an internal error counts as present.
        """
        outcome = self._attempt(pod, container, [util])
        return outcome.ret_code not in UTILITY_MISSING_CODES

    def _first_success(
        self, pod: str, container: str, commands: Sequence[Sequence[str]]
    ) -> ExecutionOutcome:
        outcome = None
        for command in commands:
            outcome = self._attempt(pod, container, command)
            if outcome.succeeded:
                return outcome
            logger.debug(f"{command[0]} failed in {pod}/{container} with {outcome.ret_code}, trying next")
        return outcome

    def _attempt(self, pod: str, container: str, command: Sequence[str]) -> ExecutionOutcome:
        return self.gateway.execute(pod, container, command, timeout=self.attempt_timeout)
