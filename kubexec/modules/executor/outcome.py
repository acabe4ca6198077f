"""
Execution outcome model.

The JSON field names (Pod, Container, RetCode, Error, Stdout, Stderr) are
consumed by existing report tooling and must not change.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from kubexec.modules.exitcodes import ExitCode, describe


def split_lines(text: str) -> List[str]:
    """
    Split captured text on line breaks.

    An empty capture yields [""] and a trailing newline yields a trailing
    empty element; consumers rely on both.
    """
    return text.split("\n")


class ExecutionOutcome(BaseModel):
    """Result of one command invocation inside a container."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    pod: str = Field(..., alias="Pod", description="Target pod name")
    container: str = Field(..., alias="Container", description="Target container name")
    ret_code: int = Field(..., alias="RetCode", description="Classified exit status")
    error: List[str] = Field(default_factory=lambda: [""], alias="Error")
    stdout: List[str] = Field(default_factory=lambda: [""], alias="Stdout")
    stderr: List[str] = Field(default_factory=lambda: [""], alias="Stderr")

    @classmethod
    def from_output(
        cls,
        pod: str,
        container: str,
        ret_code: int,
        error: str = "",
        stdout: str = "",
        stderr: str = "",
    ) -> "ExecutionOutcome":
        """Build an outcome from raw captured text."""
        return cls(
            pod=pod,
            container=container,
            ret_code=ret_code,
            error=split_lines(error),
            stdout=split_lines(stdout),
            stderr=split_lines(stderr),
        )

    @property
    def succeeded(self) -> bool:
        return self.ret_code == ExitCode.SUCCESS

    @property
    def timed_out(self) -> bool:
        return self.ret_code == ExitCode.EXECUTION_TIMEOUT

    @property
    def description(self) -> str:
        """Readable classification of ret_code ("" when undocumented)."""
        return describe(self.ret_code)

    @property
    def stdout_text(self) -> str:
        """Captured stdout exactly as received."""
        return "\n".join(self.stdout)

    @property
    def stderr_text(self) -> str:
        return "\n".join(self.stderr)
