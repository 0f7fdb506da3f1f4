"""Tests for the JSON cache files and the YAML user settings."""
import json
import os
import sys

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from conftest import make_cache
from sajda.engine.models import Zone
from sajda.engine.types import AlertMode, CalculationMethod
from sajda.store import CacheStore, SettingsStore
from sajda.user_settings import UserSettings


class TestCacheStore:
    def test_missing_files_are_misses(self, tmp_path):
        store = CacheStore(tmp_path / "data")
        assert store.load_cache() is None
        assert store.load_zones() is None

    def test_cache_saved_and_loaded(self, tmp_path):
        store = CacheStore(tmp_path / "data")
        cache = make_cache(2026, 1)

        store.save_cache(cache)
        loaded = store.load_cache()

        assert loaded.zone == "WLY01"
        assert loaded.month_tag == "Jan-2026"
        assert loaded.get("23-Jan-2026") == cache.get("23-Jan-2026")
        assert not (tmp_path / "data" / "jakim_cache.tmp").exists()

    def test_on_disk_format(self, tmp_path):
        store = CacheStore(tmp_path)
        store.save_cache(make_cache(2026, 1))

        data = json.loads((tmp_path / "jakim_cache.json").read_text(encoding="utf-8"))

        assert data["month_hash"] == "Jan-2026"
        assert data["prayers"]["01-Jan-2026"]["day"] == 1

    def test_corrupt_cache_is_a_miss(self, tmp_path):
        (tmp_path / "jakim_cache.json").write_text("{not json", encoding="utf-8")
        assert CacheStore(tmp_path).load_cache() is None

    def test_wrong_shape_is_a_miss(self, tmp_path):
        (tmp_path / "jakim_cache.json").write_text('{"zone": "WLY01"}', encoding="utf-8")
        assert CacheStore(tmp_path).load_cache() is None

    def test_zones(self, tmp_path):
        store = CacheStore(tmp_path)
        store.save_zones([
            Zone("WLY01", "Kuala Lumpur", "Wilayah Persekutuan"),
            Zone("SGR01", "Gombak", "Selangor"),
        ])

        zones = store.load_zones()

        assert set(zones) == {"WLY01", "SGR01"}
        assert zones["SGR01"].display_name == "Gombak, Selangor"
        raw = json.loads((tmp_path / "zones_cache.json").read_text(encoding="utf-8"))
        assert raw[0]["jakimCode"] == "WLY01"

    def test_corrupt_zones_are_a_miss(self, tmp_path):
        (tmp_path / "zones_cache.json").write_text('[{"code": 1}]', encoding="utf-8")
        assert CacheStore(tmp_path).load_zones() is None


class TestSettingsStore:
    def test_defaults_when_missing(self, tmp_path):
        user_settings = SettingsStore(tmp_path).load()

        assert user_settings.adhan_selection == "Nasser"
        assert user_settings.reminder_times == ["09:00", "21:00"]
        assert user_settings.alkahf_enabled is True
        assert user_settings.method() is CalculationMethod.JAKIM
        assert user_settings.alert_mode("fajr") is AlertMode.MUTE

    def test_partial_file(self, tmp_path):
        (tmp_path / "settings.yaml").write_text(
            "audio_settings:\n  fajr: adhan\ncalculation_method: MWL\n",
            encoding="utf-8",
        )

        user_settings = SettingsStore(tmp_path).load()

        assert user_settings.alert_mode("fajr") is AlertMode.ADHAN
        assert user_settings.method() is CalculationMethod.MWL
        assert user_settings.random_reminders is True

    def test_corrupt_file_gives_defaults(self, tmp_path):
        (tmp_path / "settings.yaml").write_text("reminder_times: [unclosed\n", encoding="utf-8")
        assert SettingsStore(tmp_path).load() == UserSettings()

    def test_wrong_types_give_defaults(self, tmp_path):
        (tmp_path / "settings.yaml").write_text("- just\n- a list\n", encoding="utf-8")
        assert SettingsStore(tmp_path).load() == UserSettings()

    def test_update_persists(self, tmp_path):
        store = SettingsStore(tmp_path / "nested")

        store.update(calculation_method="Egypt", alkahf_enabled=False)

        reloaded = SettingsStore(tmp_path / "nested").load()
        assert reloaded.calculation_method == "Egypt"
        assert reloaded.alkahf_enabled is False
        assert reloaded.adhan_selection == "Nasser"
