"""
Tests for application directory resolution.
"""
from pathlib import Path
from unittest.mock import patch

from packages.shared import paths


class TestAppDataDir:
    """Test per-platform base directory selection."""

    @patch.dict("os.environ", {"APPDATA": "/win/appdata"})
    def test_appdata_wins(self):
        assert paths.app_data_dir() == Path("/win/appdata") / "UsageTray"

    @patch.dict("os.environ", {"XDG_CONFIG_HOME": "/xdg"}, clear=True)
    @patch("packages.shared.paths.sys.platform", "linux")
    def test_xdg_on_linux(self):
        assert paths.app_data_dir() == Path("/xdg") / "UsageTray"

    @patch.dict("os.environ", {}, clear=True)
    @patch("packages.shared.paths.sys.platform", "darwin")
    @patch("packages.shared.paths.Path.home", return_value=Path("/Users/me"))
    def test_macos(self, _home):
        assert paths.app_data_dir() == Path("/Users/me/Library/Application Support/UsageTray")

    def test_file_locations(self, monkeypatch, tmp_path):
        monkeypatch.setenv("APPDATA", str(tmp_path))

        assert paths.config_path() == tmp_path / "UsageTray" / "config.json"
        assert paths.log_path() == tmp_path / "UsageTray" / "logs" / "app.log"

        paths.ensure_app_dirs()
        assert (tmp_path / "UsageTray" / "logs").is_dir()
