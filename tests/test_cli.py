"""Tests for the command-line interface."""

from unittest.mock import AsyncMock, patch

import pytest

from shift_sync import __version__
from shift_sync.auth.google import CredentialError
from shift_sync.cli import build_parser, main


class TestCli:
    """Tests for main()."""

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage: shift-sync" in capsys.readouterr().out

    def test_version(self, capsys):
        with pytest.raises(SystemExit):
            main(["--version"])
        assert __version__ in capsys.readouterr().out

    @pytest.mark.parametrize("command", ["run", "sync", "authorize"])
    def test_commands_parse(self, command):
        assert build_parser().parse_args([command]).command == command

    def test_sync_once(self):
        with patch("shift_sync.cli.sync", new_callable=AsyncMock) as sync:
            assert main(["sync"]) == 0

        assert sync.await_args.kwargs == {"forever": False}

    def test_run_forever(self):
        with patch("shift_sync.cli.sync", new_callable=AsyncMock) as sync:
            assert main(["run"]) == 0

        assert sync.await_args.kwargs == {"forever": True}

    def test_authorize(self):
        with patch("shift_sync.cli.authorize", new_callable=AsyncMock) as authorize:
            assert main(["authorize"]) == 0

        authorize.assert_awaited_once()

    def test_authorization_failure(self):
        with patch(
            "shift_sync.cli.sync",
            new_callable=AsyncMock,
            side_effect=CredentialError("no client secrets"),
        ):
            assert main(["sync"]) == 1

    def test_invalid_configuration(self, monkeypatch, tmp_path, capsys):
        monkeypatch.delenv("SLING_TOKEN", raising=False)
        monkeypatch.chdir(tmp_path)

        assert main(["sync"]) == 2
        assert "Invalid configuration" in capsys.readouterr().err
