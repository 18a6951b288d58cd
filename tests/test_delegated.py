"""test suite for DelegatedCommands."""
import pytest
import subprocess
from unittest.mock import patch
import tempfile
import shutil
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from cfswitch.domain.errors import (
    DelegatedCommandError,
    NoActiveProfileError,
    NoZoneSpecifiedError,
)
from cfswitch.profiles import StoreManager, Switcher
from cfswitch.services.delegated import DelegatedCommands, lamdera_app_url


def completed(returncode=0, stdout=b"", stderr=b""):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


class TestDelegatedCommands:
    @pytest.fixture
    def store_manager(self):
        temp_dir = Path(tempfile.mkdtemp())
        yield StoreManager(temp_dir / "cf-switch.json")
        shutil.rmtree(temp_dir)

    @pytest.fixture
    def switcher(self, store_manager):
        switcher = Switcher(store_manager)
        switcher.add("work", "a@x.com", "tok1", "x.com")
        switcher.add("bare", "b@y.com", "tok2")
        return switcher

    @pytest.fixture
    def commands(self, store_manager):
        return DelegatedCommands(store_manager, client="flarectl")

    @pytest.fixture
    def mock_run(self):
        with patch("cfswitch.services.delegated.subprocess.run") as mock_run:
            mock_run.return_value = completed()
            yield mock_run

    def test_purge_uses_default_zone(self, switcher, commands, mock_run):
        switcher.use("work")
        assert commands.purge() == "x.com"

        args, kwargs = mock_run.call_args
        assert args[0] == ["flarectl", "zone", "purge", "--zone", "x.com", "--everything"]
        assert kwargs["env"]["CF_API_EMAIL"] == "a@x.com"
        assert kwargs["env"]["CF_API_TOKEN"] == "tok1"
        assert kwargs["env"]["CF_API_KEY"] == "tok1"

    def test_purge_explicit_zone_wins(self, switcher, commands, mock_run):
        switcher.use("work")
        assert commands.purge("other.com") == "other.com"
        assert "other.com" in mock_run.call_args[0][0]

    def test_purge_without_zone(self, switcher, commands, mock_run):
        switcher.use("bare")
        with pytest.raises(NoZoneSpecifiedError) as exc_info:
            commands.purge()
        assert exc_info.value.profile_name == "bare"
        mock_run.assert_not_called()

    def test_purge_without_active_profile(self, switcher, commands, mock_run):
        with pytest.raises(NoActiveProfileError):
            commands.purge("x.com")
        mock_run.assert_not_called()

    def test_purge_empty_store(self, commands, mock_run):
        with pytest.raises(NoActiveProfileError):
            commands.purge()
        mock_run.assert_not_called()

    def test_client_failure_passes_status_through(self, switcher, commands, mock_run, capsys):
        switcher.use("work")
        mock_run.return_value = completed(returncode=3, stdout=b"partial\n", stderr=b"boom\n")

        with pytest.raises(DelegatedCommandError) as exc_info:
            commands.purge()

        assert exc_info.value.exit_code == 3
        captured = capsys.readouterr()
        assert "partial\n" in captured.err
        assert "boom\n" in captured.err
        assert "partial" not in captured.out

    def test_client_output_relayed_to_stderr(self, switcher, commands, mock_run, capsys):
        switcher.use("work")
        mock_run.return_value = completed(stdout=b"Purged zone x.com\n")
        commands.purge()
        captured = capsys.readouterr()
        assert "Purged zone x.com\n" in captured.err
        assert captured.out == ""

    def test_missing_client(self, switcher, commands, mock_run):
        switcher.use("work")
        mock_run.side_effect = FileNotFoundError(2, "No such file or directory", "flarectl")

        with pytest.raises(DelegatedCommandError) as exc_info:
            commands.purge()

        assert exc_info.value.exit_code == 127
        assert "brew install" in str(exc_info.value)

    def test_custom_client_binary(self, switcher, store_manager, mock_run):
        switcher.use("work")
        DelegatedCommands(store_manager, client="/opt/bin/flarectl").purge()
        assert mock_run.call_args[0][0][0] == "/opt/bin/flarectl"

    def test_add_lamdera_app(self, switcher, commands, mock_run, capsys):
        switcher.use("work")
        assert commands.add_lamdera_app("my.app.com") == "my.app.com"

        assert mock_run.call_args[0][0] == [
            "flarectl", "dns", "create",
            "--zone", "my.app.com",
            "--type", "CNAME",
            "--name", "@",
            "--content", "apps.lamdera.app",
            "--proxy",
        ]
        err = capsys.readouterr().err
        assert "https://my-app-com.lamdera.app/" in err

    def test_add_lamdera_app_default_zone(self, switcher, commands, mock_run):
        switcher.use("work")
        assert commands.add_lamdera_app() == "x.com"

    def test_add_lamdera_app_without_zone(self, switcher, commands, mock_run):
        switcher.use("bare")
        with pytest.raises(NoZoneSpecifiedError):
            commands.add_lamdera_app()
        mock_run.assert_not_called()

    def test_add_lamdera_app_failure(self, switcher, commands, mock_run):
        switcher.use("work")
        mock_run.return_value = completed(returncode=1, stderr=b"record already exists\n")
        with pytest.raises(DelegatedCommandError) as exc_info:
            commands.add_lamdera_app()
        assert exc_info.value.exit_code == 1

    def test_killed_client_maps_to_shell_status(self, switcher, commands, mock_run):
        switcher.use("work")
        mock_run.return_value = completed(returncode=-9)
        with pytest.raises(DelegatedCommandError) as exc_info:
            commands.purge()
        assert exc_info.value.returncode == -9
        assert exc_info.value.exit_code == 137


class TestRealClient:
    """runs a stand-in flarectl script instead of mocking subprocess."""

    @pytest.fixture
    def store_manager(self, tmp_path):
        store_manager = StoreManager(tmp_path / "cf-switch.json")
        switcher = Switcher(store_manager)
        switcher.add("work", "a@x.com", "tok1", "x.com")
        switcher.use("work")
        return store_manager

    def make_client(self, tmp_path, body):
        client = tmp_path / "fake-flarectl"
        client.write_text("#!/bin/sh\n" + body)
        client.chmod(0o755)
        return str(client)

    @pytest.mark.skipif(shutil.which("sh") is None, reason="sh not available")
    def test_binary_output_relayed_verbatim(self, tmp_path, store_manager, capsysbinary):
        client = self.make_client(
            tmp_path,
            "printf '\\377\\376 purged %s\\n' \"$CF_API_TOKEN\"\n"
            "printf 'warn\\n' >&2\n",
        )
        DelegatedCommands(store_manager, client=client).purge()

        captured = capsysbinary.readouterr()
        assert b"\xff\xfe purged tok1\n" in captured.err
        assert b"warn\n" in captured.err
        assert captured.out == b""

    @pytest.mark.skipif(shutil.which("sh") is None, reason="sh not available")
    def test_client_exit_status(self, tmp_path, store_manager):
        client = self.make_client(tmp_path, "printf '\\377 oops\\n' >&2\nexit 5\n")
        with pytest.raises(DelegatedCommandError) as exc_info:
            DelegatedCommands(store_manager, client=client).purge()
        assert exc_info.value.exit_code == 5


def test_lamdera_app_url():
    assert lamdera_app_url("myapp.com") == "https://myapp-com.lamdera.app/"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
