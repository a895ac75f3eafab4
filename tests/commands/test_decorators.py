"""Unit tests for command decorators."""

from unittest.mock import patch

import pytest
import typer

from taskflow.commands.decorators import AppError, command_wrapper
from taskflow.utils.exit_codes import ERROR_NOT_FOUND


class TestCommandWrapper:
    """Tests for command_wrapper()."""

    def test_returns_result(self):
        @command_wrapper
        def ok():
            return 42

        assert ok() == 42

    def test_runs_coroutines(self):
        @command_wrapper
        async def ok_async(value):
            return value * 2

        assert ok_async(21) == 42

    def test_app_error_becomes_exit_code(self):
        @command_wrapper
        def missing():
            raise AppError("Board not found", ERROR_NOT_FOUND)

        with patch("taskflow.commands.decorators.format_error") as format_error:
            with pytest.raises(typer.Exit) as exc_info:
                missing()

        assert exc_info.value.exit_code == ERROR_NOT_FOUND
        format_error.assert_called_once_with("Board not found")

    def test_typer_exit_passes_through(self):
        @command_wrapper
        def cancelled():
            raise typer.Exit(0)

        with pytest.raises(typer.Exit) as exc_info:
            cancelled()

        assert exc_info.value.exit_code == 0

    def test_unexpected_error_exits_with_one(self):
        @command_wrapper
        def broken():
            raise KeyError("boom")

        with patch("taskflow.commands.decorators.format_error") as format_error:
            with pytest.raises(typer.Exit) as exc_info:
                broken()

        assert exc_info.value.exit_code == 1
        message = format_error.call_args.args[0]
        assert "unexpected error" in message
        assert "taskflow.log" in message

    def test_preserves_metadata(self):
        @command_wrapper
        def documented():
            """Docstring."""

        assert documented.__name__ == "documented"
        assert documented.__doc__ == "Docstring."
