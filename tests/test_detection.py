"""Unit tests for runshell.shell.detection and runshell.shell.names."""

import os
from unittest.mock import MagicMock, patch

import pytest

from runshell.shell.ancestry import ProcessRecord
from runshell.shell.detection import (
    decide_shell,
    find_exe,
    login_shell_for_current_user,
    resolve_shell,
    shell_from_config,
)
from runshell.shell.names import is_supported_shell, shell_name


class FakeProcessTable:
    def __init__(self, *records: ProcessRecord) -> None:
        self.records = {r.pid: r for r in records}

    def lookup(self, pid: int) -> ProcessRecord:
        if pid not in self.records:
            raise ProcessLookupError(pid)
        return self.records[pid]


class TestShellName:
    @pytest.mark.parametrize(
        "argv0, expected",
        [
            ("bash", "bash"),
            ("/usr/local/bin/zsh", "zsh"),
            ("-zsh", "zsh"),
            ("/bin/-bash", "bash"),
            ("fish.exe", "fish"),
            ("BASH.EXE", "BASH"),
            ("--bash", "-bash"),
            ("python3", "python3"),
        ],
    )
    def test_normalization(self, argv0, expected):
        assert shell_name(argv0) == expected

    def test_catalog(self):
        assert is_supported_shell("bash")
        assert is_supported_shell("zsh")
        assert is_supported_shell("fish")
        assert not is_supported_shell("sh")
        assert not is_supported_shell("pwsh")


class TestFindExe:
    def test_path_with_separator_is_made_absolute(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert find_exe("./bin/zsh") == os.path.join(os.getcwd(), "bin", "zsh")

    def test_bare_name_found_on_path(self, fake_bin):
        expected = fake_bin("zsh")
        assert find_exe("zsh") == expected

    def test_not_found_returns_input(self):
        with patch("runshell.shell.detection.shutil.which", return_value=None):
            assert find_exe("no-such-shell") == "no-such-shell"

    def test_extra_dirs_are_searched(self):
        with patch("runshell.shell.detection.shutil.which", return_value=None) as mock_which:
            find_exe("zsh")
        search = mock_which.call_args.kwargs["path"].split(os.pathsep)
        assert "/usr/local/bin" in search
        assert "/opt/homebrew/bin" in search


class TestLoginShell:
    def test_returns_passwd_shell(self):
        entry = MagicMock(pw_shell="/usr/bin/fish", pw_name="alice")
        with patch("runshell.shell.detection.pwd.getpwuid", return_value=entry):
            assert login_shell_for_current_user() == "/usr/bin/fish"

    def test_missing_entry_raises_lookup_error(self):
        with patch("runshell.shell.detection.pwd.getpwuid", side_effect=KeyError(1000)):
            with pytest.raises(LookupError):
                login_shell_for_current_user()

    def test_blank_shell_raises_lookup_error(self):
        entry = MagicMock(pw_shell="", pw_name="alice")
        with patch("runshell.shell.detection.pwd.getpwuid", return_value=entry):
            with pytest.raises(LookupError):
                login_shell_for_current_user()


class TestShellFromConfig:
    def test_configured_value(self, write_config):
        write_config("shell zsh -l\n")
        decision = shell_from_config()
        assert (decision.value, decision.source) == ("zsh -l", "config")

    @patch("runshell.shell.detection.login_shell_for_current_user", return_value="/usr/bin/fish")
    def test_dot_uses_login_shell(self, _login, write_config):
        write_config("shell .\n")
        decision = shell_from_config()
        assert (decision.value, decision.source, decision.fallback) == (
            "/usr/bin/fish",
            "login-shell",
            False,
        )

    @patch("runshell.shell.detection.login_shell_for_current_user", side_effect=LookupError("no"))
    def test_failed_login_lookup_uses_bin_sh(self, _login):
        decision = shell_from_config()
        assert (decision.value, decision.fallback) == ("/bin/sh", True)


class TestResolveShell:
    def test_configured_shell_is_resolved_on_path(self, write_config, fake_bin):
        zsh = fake_bin("zsh")
        write_config("shell zsh\nshell_integration enabled\n")
        assert resolve_shell("") == [zsh]

    def test_missing_shell_key_uses_login_shell(self, write_config, fake_bin):
        fish = fake_bin("fish")
        write_config("shell_integration enabled\n")
        with patch("runshell.shell.detection.login_shell_for_current_user", return_value=fish):
            assert resolve_shell("") == [fish]

    def test_requested_command_line_keeps_arguments(self, fake_bin):
        bash = fake_bin("bash")
        assert resolve_shell("bash --login -O extglob") == [bash, "--login", "-O", "extglob"]

    def test_quoted_arguments(self, fake_bin):
        zsh = fake_bin("zsh")
        assert resolve_shell("zsh -c 'echo hi there'") == [zsh, "-c", "echo hi there"]

    def test_unsplittable_request_is_one_word(self, fake_bin):
        odd = fake_bin('odd"shell')
        decision = decide_shell('odd"shell')
        assert decision.value == [odd]
        assert decision.source == "requested"

    @pytest.mark.parametrize(
        "requested",
        ["/nonexistent/zsh --login", "definitely-not-a-shell-xyz -i", "zsh 'unterminated"],
    )
    def test_unresolvable_request_collapses_to_bin_sh(self, requested):
        decision = decide_shell(requested)
        assert decision.value == ["/bin/sh"]
        assert decision.source == "safe-fallback"
        assert decision.fallback is True

    def test_non_executable_file_collapses_to_bin_sh(self, fake_bin):
        fake_bin("zsh", executable=False)
        with patch("runshell.shell.detection.shutil.which", return_value=None):
            assert resolve_shell("zsh -l") == ["/bin/sh"]

    def test_directory_is_not_an_executable(self, tmp_path):
        assert resolve_shell(str(tmp_path)) == ["/bin/sh"]

    def test_dot_uses_shell_from_ancestry(self, fake_bin):
        bash = fake_bin("bash")
        table = FakeProcessTable(
            ProcessRecord(pid=os.getppid(), ppid=50, cmdline=["python"]),
            ProcessRecord(pid=50, ppid=0, cmdline=["-bash"]),
        )
        decision = decide_shell(".", table)
        assert decision.value == [bash]
        assert decision.source == "ancestry"
        assert decision.fallback is False

    def test_dot_without_shell_in_ancestry_matches_empty_request(self, write_config, fake_bin):
        fake_bin("zsh")
        write_config("shell zsh\n")
        with patch("runshell.shell.detection.find_shell_in_ancestry", return_value=""):
            assert resolve_shell(".") == resolve_shell("")

    def test_dot_without_shell_in_ancestry_is_tagged_fallback(self, write_config, fake_bin):
        fake_bin("zsh")
        write_config("shell zsh\n")
        decision = decide_shell(".", FakeProcessTable())
        assert decision.source == "config"
        assert decision.fallback is True
