import runpy
from unittest.mock import patch

import pytest


def test_module_main_raises_system_exit_with_cli_exit_code() -> None:
    with patch("runshell.cli.main", return_value=3) as mock_main:
        with pytest.raises(SystemExit) as exc_info:
            runpy.run_module("runshell.__main__", run_name="__main__")

    assert exc_info.value.code == 3
    mock_main.assert_called_once_with()


def test_module_main_passes_guard_through(monkeypatch) -> None:
    monkeypatch.setattr("sys.argv", ["runshell", "guard", "true"])
    with patch("runshell.cli.guard.run_guarded", return_value=0) as mock_guarded:
        with pytest.raises(SystemExit) as exc_info:
            runpy.run_module("runshell.__main__", run_name="__main__")

    assert exc_info.value.code == 0
    mock_guarded.assert_called_once_with(["true"])
