"""
Tests for settings management module.
Consolidated tests with high assertion density.
"""

import json
from unittest.mock import patch

import pytest

from cybersec_monitor.utils import settings
from cybersec_monitor.utils.settings import (
    FEATURES,
    Entitlements,
    Settings,
    get_settings,
    save_settings,
)

DEFAULTS = {
    "clipboard_monitoring": True,
    "malware_detection": True,
    "scan_interval": 30,
    "scan_scope": "System",
}


class TestSettingsDataclass:
    """Tests for Settings dataclass initialization"""

    @pytest.mark.parametrize(
        "init_kwargs",
        [
            {},
            {"scan_interval": 5},
            {"clipboard_monitoring": False, "scan_scope": "Home"},
        ],
        ids=["defaults", "custom-interval", "custom-monitoring"],
    )
    def test_initialization_with_defaults_and_custom_values(self, init_kwargs):
        """Settings should initialize with correct defaults and accept custom values"""
        s = Settings(**init_kwargs)
        expected = {**DEFAULTS, **init_kwargs}
        assert vars(s) == expected


class TestSettingsPersistence:
    """Tests for Settings.save() and Settings.load() file operations"""

    def test_save_creates_directory_and_writes_then_overwrites(self, tmp_path):
        """save() should create config directory, write JSON, and overwrite on subsequent saves"""
        config_dir = tmp_path / "config"
        config_file = config_dir / "settings.json"

        with (
            patch.object(settings, "CONFIG_DIR", str(config_dir)),
            patch.object(settings, "CONFIG_FILE", str(config_file)),
        ):
            Settings(scan_interval=10).save()

            assert config_dir.is_dir()
            with open(config_file) as f:
                data1 = json.load(f)
            assert data1 == {**DEFAULTS, "scan_interval": 10}

            Settings(malware_detection=False).save()

            with open(config_file) as f:
                data2 = json.load(f)
            assert data2 == {**DEFAULTS, "malware_detection": False}

    def test_load_reads_existing_file_and_filters_obsolete_fields(self, tmp_path):
        """load() should read valid fields, ignore obsolete fields, and apply defaults for missing"""
        config_file = tmp_path / "settings.json"
        config_file.write_text(
            json.dumps(
                {
                    "scan_interval": 45,
                    "malware_detection": False,
                    "obsolete_field": "should be ignored",
                    "network_analysis": True,
                }
            )
        )

        with patch.object(settings, "CONFIG_FILE", str(config_file)):
            s = Settings.load()

        assert s.scan_interval == 45
        assert s.malware_detection is False
        assert s.clipboard_monitoring is True
        assert set(vars(s)) == set(DEFAULTS)

    @pytest.mark.parametrize(
        "scenario",
        ["file_missing", "invalid_json", "permission_error"],
    )
    def test_load_returns_defaults_on_any_error(self, tmp_path, scenario):
        """load() should return default settings on file missing, invalid JSON, or read error"""
        if scenario == "file_missing":
            config_file = tmp_path / "nonexistent" / "settings.json"
        else:
            config_file = tmp_path / "settings.json"
            if scenario == "invalid_json":
                config_file.write_text("not valid json {{{")
            else:
                config_file.write_text('{"scan_interval": 45}')

        with patch.object(settings, "CONFIG_FILE", str(config_file)):
            if scenario == "permission_error":
                with patch(
                    "builtins.open", side_effect=PermissionError("Access denied")
                ):
                    s = Settings.load()
            else:
                s = Settings.load()

        assert vars(s) == DEFAULTS


class TestSettingsGlobalAccess:
    """Tests for get_settings() and save_settings() singleton pattern"""

    def setup_method(self):
        settings._settings = None

    def teardown_method(self):
        settings._settings = None

    def test_get_settings_lazy_loads_caches_and_save_persists(self, tmp_path):
        config_dir = tmp_path / "config"
        config_file = config_dir / "settings.json"
        config_dir.mkdir(parents=True)
        config_file.write_text('{"scan_interval": 75}')

        with (
            patch.object(settings, "CONFIG_DIR", str(config_dir)),
            patch.object(settings, "CONFIG_FILE", str(config_file)),
        ):
            s1 = get_settings()
            assert s1.scan_interval == 75
            assert get_settings() is s1

            s1.clipboard_monitoring = False
            save_settings()

            with open(config_file) as f:
                data = json.load(f)
            assert data == {**DEFAULTS, "scan_interval": 75, "clipboard_monitoring": False}

    def test_save_settings_noop_when_never_loaded(self):
        with patch.object(Settings, "save") as mock_save:
            save_settings()
            assert mock_save.call_count == 0


class TestEntitlements:
    def test_default_has_nothing_unlocked(self):
        entitlements = Entitlements()
        assert entitlements.has_active_subscription is False
        assert not any(entitlements.feature_available(f) for f in FEATURES)
        assert entitlements.subscription_message("fix_issues").startswith("🔒")
        assert "requires a subscription" in entitlements.subscription_message("unknown")

    @pytest.mark.parametrize(
        "env,unlocked",
        [
            ({}, False),
            ({"DEV_MODE": "true"}, True),
            ({"DEV_MODE": "TRUE"}, True),
            ({"DEV_MODE": "1"}, False),
            ({"LICENSE_TOKEN": "abc123"}, True),
            ({"LICENSE_TOKEN": ""}, False),
        ],
        ids=["nothing", "dev-mode", "dev-mode-upper", "dev-mode-one", "token", "empty-token"],
    )
    def test_from_env(self, monkeypatch, env, unlocked):
        monkeypatch.delenv("DEV_MODE", raising=False)
        monkeypatch.delenv("LICENSE_TOKEN", raising=False)
        for key, value in env.items():
            monkeypatch.setenv(key, value)

        entitlements = Entitlements.from_env()
        assert entitlements.has_active_subscription is unlocked
        assert entitlements.feature_available("export_reports") is unlocked

    def test_subscribed_message(self):
        entitlements = Entitlements(license_token="abc")
        assert entitlements.subscription_message("fix_issues") == (
            "Feature available with your subscription."
        )
