"""Tests for haxai.engine.deploy_helpers."""

import os
import subprocess
from unittest.mock import MagicMock, patch

from haxai.engine.deploy_helpers import _find_surge, check_surge_login, default_domain


def _completed(returncode=0, stdout="", stderr=""):
    result = MagicMock()
    result.returncode = returncode
    result.stdout = stdout
    result.stderr = stderr
    return result


class TestFindSurge:

    @patch("haxai.engine.deploy_helpers.shutil.which", return_value="/usr/local/bin/surge")
    def test_on_path(self, _mock_which):
        assert _find_surge() == "/usr/local/bin/surge"

    @patch("haxai.engine.deploy_helpers.shutil.which", return_value=None)
    def test_local_node_modules(self, _mock_which, tmp_path, monkeypatch):
        bin_dir = tmp_path / "node_modules" / ".bin"
        bin_dir.mkdir(parents=True)
        (bin_dir / "surge").write_text("#!/bin/sh\n", encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        assert _find_surge().endswith(os.path.join("node_modules", ".bin", "surge"))

    @patch("haxai.engine.deploy_helpers.shutil.which", return_value=None)
    def test_bare_name(self, _mock_which, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert _find_surge() == "surge"


class TestCheckSurgeLogin:

    @patch("haxai.engine.deploy_helpers._find_surge", return_value="surge")
    @patch("haxai.engine.deploy_helpers.subprocess.run")
    def test_logged_in(self, mock_run, _mock_find):
        mock_run.return_value = _completed(stdout="instructor@example.edu\n")
        status = check_surge_login()
        assert status.authenticated is True
        assert status.account == "instructor@example.edu"
        assert mock_run.call_args[0][0] == ["surge", "whoami"]

    @patch("haxai.engine.deploy_helpers._find_surge", return_value="surge")
    @patch("haxai.engine.deploy_helpers.subprocess.run")
    def test_non_zero_exit(self, mock_run, _mock_find):
        mock_run.return_value = _completed(returncode=1, stderr="Not Authenticated")
        status = check_surge_login()
        assert status.authenticated is False
        assert status.detail == "Not Authenticated"

    @patch("haxai.engine.deploy_helpers._find_surge", return_value="surge")
    @patch("haxai.engine.deploy_helpers.subprocess.run")
    def test_not_authenticated_message(self, mock_run, _mock_find):
        mock_run.return_value = _completed(stdout="Not authenticated")
        assert check_surge_login().authenticated is False

    @patch("haxai.engine.deploy_helpers._find_surge", return_value="surge")
    @patch("haxai.engine.deploy_helpers.subprocess.run", side_effect=FileNotFoundError("surge"))
    def test_not_installed(self, _mock_run, _mock_find):
        status = check_surge_login()
        assert status.authenticated is False
        assert "not installed" in status.detail

    @patch("haxai.engine.deploy_helpers._find_surge", return_value="surge")
    @patch(
        "haxai.engine.deploy_helpers.subprocess.run",
        side_effect=subprocess.TimeoutExpired(cmd="surge whoami", timeout=20),
    )
    def test_timeout(self, _mock_run, _mock_find):
        status = check_surge_login()
        assert status.authenticated is False
        assert "timed out" in status.detail


class TestDefaultDomain:

    def test_format(self):
        assert default_domain("My Blog!", 1700000012345) == "my-blog-1700000012345.surge.sh"

    def test_custom_suffix(self):
        assert default_domain("demo", 1, suffix="example.test") == "demo-1.example.test"

    def test_no_usable_characters(self):
        assert default_domain("!!!", 1) == "site-1.surge.sh"
