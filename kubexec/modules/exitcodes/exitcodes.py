"""
POSIX shell exit code taxonomy for remote command executions.

Negative values are sentinels owned by kubexec: they never come from a
remote process. Everything in [0, 255] mirrors shell conventions, with
128+n meaning "terminated by signal n".
"""

from enum import IntEnum
from typing import Dict, Optional, Tuple

from kubexec.errors import CodeExitError


class ExitCode(IntEnum):
    """Named exit codes."""

    EXECUTION_TIMEOUT = -2
    INTERNAL_APP_ERROR = -1
    SUCCESS = 0
    GENERAL_ERROR = 1
    INCORRECT_USAGE = 2
    COMMAND_CANNOT_EXECUTE = 126
    COMMAND_NOT_FOUND = 127
    INVALID_ARGUMENT_TO_EXIT = 128
    FATAL_ERROR_SIGNAL_1 = 129
    # 130 is SIGINT; there is no separate FATAL_ERROR_SIGNAL_2
    SCRIPT_TERMINATED_BY_CONTROL_C = 130
    FATAL_ERROR_SIGNAL_3 = 131
    FATAL_ERROR_SIGNAL_4 = 132
    FATAL_ERROR_SIGNAL_5 = 133
    FATAL_ERROR_SIGNAL_6 = 134
    FATAL_ERROR_SIGNAL_7 = 135
    FATAL_ERROR_SIGNAL_8 = 136
    FATAL_ERROR_SIGNAL_9 = 137
    FATAL_ERROR_SIGNAL_10 = 138
    FATAL_ERROR_SIGNAL_11 = 139
    FATAL_ERROR_SIGNAL_12 = 140
    FATAL_ERROR_SIGNAL_13 = 141
    FATAL_ERROR_SIGNAL_14 = 142
    FATAL_ERROR_SIGNAL_15 = 143
    EXIT_STATUS_OUT_OF_RANGE = 255


SENTINEL_DESCRIPTIONS: Dict[int, str] = {
    ExitCode.EXECUTION_TIMEOUT: "Execution timed out",
    ExitCode.INTERNAL_APP_ERROR: "Internal app error",
}

EXIT_CODE_DESCRIPTIONS: Dict[int, str] = {
    0: "Success",
    126: "Command cannot execute",
    127: "Command not found",
    128: "Invalid argument to exit",
    130: "Script terminated by Control-C (SIGINT)",
    255: "Exit status out of range",
    # Signal based exit codes (128+n)
    129: "Fatal error signal 1 (SIGHUP)",
    131: "Fatal error signal 3 (SIGQUIT)",
    132: "Fatal error signal 4 (SIGILL)",
    133: "Fatal error signal 5 (SIGTRAP)",
    134: "Fatal error signal 6 (SIGABRT/SIGIOT)",
    135: "Fatal error signal 7 (SIGBUS)",
    136: "Fatal error signal 8 (SIGFPE)",
    137: "Fatal error signal 9 (SIGKILL)",
    138: "Fatal error signal 10 (SIGUSR1)",
    139: "Fatal error signal 11 (SIGSEGV)",
    140: "Fatal error signal 12 (SIGUSR2)",
    141: "Fatal error signal 13 (SIGPIPE)",
    142: "Fatal error signal 14 (SIGALRM)",
    143: "Fatal error signal 15 (SIGTERM)",
}


def as_exit_code(code: int) -> int:
    """Return the ExitCode member for a known value, the plain int otherwise."""
    try:
        return ExitCode(code)
    except ValueError:
        return code


def describe(code: int) -> str:
    """
    Get the description for an exit code.

    Returns an empty string when the code has no entry, which is distinct
    from exit code 0 and its "Success" description.
    """
    if code in SENTINEL_DESCRIPTIONS:
        return SENTINEL_DESCRIPTIONS[code]
    return EXIT_CODE_DESCRIPTIONS.get(code, "")


def classify(error: Optional[BaseException]) -> Tuple[int, str]:
    """
    Classify an execution failure.

    Args:
        error: Exception raised while streaming a remote command

    Returns:
        (exit code, description). Structured exit failures yield their own
        code; anything else yields (INTERNAL_APP_ERROR, "").
    """
    if not isinstance(error, CodeExitError):
        return ExitCode.INTERNAL_APP_ERROR, ""

    code = as_exit_code(error.code)
    if error.code not in EXIT_CODE_DESCRIPTIONS:
        return code, f"Exit code {error.code} description not found!"
    return code, EXIT_CODE_DESCRIPTIONS[error.code]
