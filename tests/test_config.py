# tests/test_config.py

import pytest
from pathlib import Path
import sys

# Add src to path
sys.path.append(str(Path(__file__).parent.parent / 'src'))

from floatchat.config import Config, DEFAULT_SETTINGS


class TestConfig:
    """Test cases for the configuration manager"""

    @pytest.fixture
    def settings_file(self, tmp_path):
        path = tmp_path / 'settings.yaml'
        path.write_text(
            "profile:\n"
            "  default_max_depth: 1500\n"
            "map:\n"
            "  zoom: 5\n"
        )
        return path

    def test_defaults_without_file(self, tmp_path):
        cfg = Config(config_path=str(tmp_path / 'missing.yaml'))
        assert cfg.get('profile.default_max_depth') == 2000
        assert cfg.get('map.center') == [-27.6057, 78.8352]
        assert cfg.get('chat.active_floats_badge') == 247

    def test_yaml_merges_over_defaults(self, settings_file):
        cfg = Config(config_path=str(settings_file))
        assert cfg.get('profile.default_max_depth') == 1500
        assert cfg.get('profile.min_max_depth') == 100
        assert cfg.get('map.zoom') == 5
        assert cfg.get('map.tiles') == 'OpenStreetMap'

    def test_defaults_not_mutated(self, settings_file):
        Config(config_path=str(settings_file))
        assert DEFAULT_SETTINGS['profile']['default_max_depth'] == 2000

    def test_missing_key(self, tmp_path):
        cfg = Config(config_path=str(tmp_path / 'missing.yaml'))
        assert cfg.get('profile.unknown') is None
        assert cfg.get('nothing.here', 'fallback') == 'fallback'

    def test_set(self, tmp_path):
        cfg = Config(config_path=str(tmp_path / 'missing.yaml'))
        cfg.set('chat.typing_delay_seconds', 0)
        cfg.set('new.section.value', 'x')
        assert cfg.get('chat.typing_delay_seconds') == 0
        assert cfg.get('new.section.value') == 'x'

    def test_load_config(self, tmp_path, settings_file):
        cfg = Config(config_path=str(tmp_path / 'missing.yaml'))
        cfg.set('map.zoom', 9)
        cfg.load_config(str(settings_file))
        assert cfg.get('map.zoom') == 5
        assert cfg.config_path == settings_file

    def test_invalid_yaml_falls_back(self, tmp_path):
        path = tmp_path / 'broken.yaml'
        path.write_text("profile: [unclosed\n")
        cfg = Config(config_path=str(path))
        assert cfg.get('profile.default_max_depth') == 2000

    def test_environment_override(self, tmp_path, monkeypatch):
        """FLOATCHAT_<KEY> overrides and is cast to the configured type"""
        cfg = Config(config_path=str(tmp_path / 'missing.yaml'))
        monkeypatch.setenv('FLOATCHAT_PROFILE_DEFAULT_MAX_DEPTH', '1000')
        monkeypatch.setenv('FLOATCHAT_CHAT_TYPING_DELAY_SECONDS', '0.25')
        monkeypatch.setenv('FLOATCHAT_LOGGING_LEVEL', 'DEBUG')
        monkeypatch.setenv('FLOATCHAT_ANALYSIS_ACCEPTED_EXTENSIONS', '.nc, .nc4')
        assert cfg.get('profile.default_max_depth') == 1000
        assert cfg.get('chat.typing_delay_seconds') == 0.25
        assert cfg.get('logging.level') == 'DEBUG'
        assert cfg.get('analysis.accepted_extensions') == ['.nc', '.nc4']

    def test_malformed_environment_override(self, tmp_path, monkeypatch):
        """Unparseable numeric overrides keep the configured value"""
        cfg = Config(config_path=str(tmp_path / 'missing.yaml'))
        monkeypatch.setenv('FLOATCHAT_PROFILE_DEFAULT_MAX_DEPTH', 'abc')
        monkeypatch.setenv('FLOATCHAT_CHAT_TYPING_DELAY_SECONDS', 'slow')
        assert cfg.get('profile.default_max_depth') == 2000
        assert cfg.get('chat.typing_delay_seconds') == 1.5


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
