"""Unit tests for shell execution utilities."""

import subprocess
from unittest.mock import MagicMock, patch

import pytest
from bloatctl.utils.shell import CommandResult, command_exists, run_command


class TestCommandResult:
    """Tests for CommandResult dataclass."""

    def test_success(self) -> None:
        """success reflects a zero exit code."""
        assert CommandResult(stdout="", stderr="", returncode=0).success is True
        assert CommandResult(stdout="", stderr="", returncode=1).success is False

    def test_output_combines_streams(self) -> None:
        """output joins non-empty stripped stdout and stderr."""
        result = CommandResult(stdout="out\n", stderr="  err ", returncode=1)
        assert result.output == "out\nerr"

    def test_output_empty(self) -> None:
        """output is empty when both streams are blank."""
        assert CommandResult(stdout="\n", stderr="", returncode=0).output == ""


class TestRunCommand:
    """Tests for run_command function."""

    @patch("bloatctl.utils.shell.subprocess.run")
    def test_returns_result(self, mock_run: MagicMock) -> None:
        """run_command wraps the completed process."""
        mock_run.return_value = MagicMock(stdout="device\n", stderr="", returncode=0)

        result = run_command(["adb", "get-state"], timeout=5.0)

        assert result == CommandResult(stdout="device\n", stderr="", returncode=0)
        assert mock_run.call_args.kwargs["timeout"] == 5.0
        assert mock_run.call_args.kwargs["capture_output"] is True

    @patch("bloatctl.utils.shell.subprocess.run")
    def test_nonzero_exit_returned(self, mock_run: MagicMock) -> None:
        """A failing command is reported through the result, not raised."""
        mock_run.return_value = MagicMock(stdout="", stderr="error: no devices", returncode=1)

        result = run_command(["adb", "get-state"])

        assert result.success is False
        assert result.output == "error: no devices"
        assert set(mock_run.call_args.kwargs) == {"capture_output", "text", "timeout"}

    @patch("bloatctl.utils.shell.subprocess.run")
    def test_propagates_timeout(self, mock_run: MagicMock) -> None:
        """run_command lets TimeoutExpired propagate."""
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="adb", timeout=5)

        with pytest.raises(subprocess.TimeoutExpired):
            run_command(["adb", "get-state"], timeout=5.0)

    def test_raises_file_not_found(self) -> None:
        """run_command raises FileNotFoundError for missing commands."""
        with pytest.raises(FileNotFoundError):
            run_command(["nonexistent_command_xyz_12345"])


class TestCommandExists:
    """Tests for command_exists function."""

    def test_existing_command(self) -> None:
        """command_exists finds commands on PATH."""
        with patch("bloatctl.utils.shell.shutil.which", return_value="/usr/bin/adb"):
            assert command_exists("adb") is True

    def test_missing_command(self) -> None:
        """command_exists returns False for missing commands."""
        with patch("bloatctl.utils.shell.shutil.which", return_value=None):
            assert command_exists("adb") is False
