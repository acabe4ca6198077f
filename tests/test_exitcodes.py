"""
Unit tests for the exit code taxonomy.
"""

import pytest

from kubexec.errors import CodeExitError, ExecTransportError
from kubexec.modules.exitcodes import EXIT_CODE_DESCRIPTIONS, ExitCode, classify, describe

DOCUMENTED_CODES = {0, 126, 127, 128, 129, 130, *range(131, 144), 255}


class TestDescribe:
    """Test description lookup."""

    def test_documented_codes_have_descriptions(self):
        """Exactly the 20 documented codes in [0, 255] carry text."""
        described = {code for code in range(256) if describe(code)}
        assert described == DOCUMENTED_CODES
        assert len(described) == 20

    @pytest.mark.parametrize("code", [1, 2, 50, 200])
    def test_undocumented_codes_are_empty(self, code):
        assert describe(code) == ""

    def test_success_is_not_empty(self):
        assert describe(0) == "Success"

    def test_sigint_has_single_entry(self):
        """130 describes Control-C, not a generic signal 2 entry."""
        assert describe(130) == "Script terminated by Control-C (SIGINT)"
        assert not any("signal 2 " in text for text in EXIT_CODE_DESCRIPTIONS.values())

    def test_sentinels(self):
        assert describe(ExitCode.INTERNAL_APP_ERROR) == "Internal app error"
        assert describe(ExitCode.EXECUTION_TIMEOUT) == "Execution timed out"
        assert ExitCode.EXECUTION_TIMEOUT != ExitCode.INTERNAL_APP_ERROR


class TestClassify:
    """Test failure classification."""

    def test_sigkill(self):
        assert classify(CodeExitError(137)) == (137, "Fatal error signal 9 (SIGKILL)")

    def test_unknown_code(self):
        assert classify(CodeExitError(200)) == (200, "Exit code 200 description not found!")

    def test_undocumented_named_code(self):
        """Codes 1 and 2 have names but no table entry."""
        code, description = classify(CodeExitError(1))
        assert code == ExitCode.GENERAL_ERROR
        assert description == "Exit code 1 description not found!"

    def test_known_code_returns_enum_member(self):
        code, _ = classify(CodeExitError(127))
        assert code is ExitCode.COMMAND_NOT_FOUND

    @pytest.mark.parametrize(
        "error",
        [
            ConnectionError("connection refused"),
            ExecTransportError("container not found"),
            ValueError("malformed request"),
            None,
        ],
    )
    def test_non_exit_failures_are_internal(self, error):
        assert classify(error) == (ExitCode.INTERNAL_APP_ERROR, "")
