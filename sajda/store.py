"""On-disk persistence.

- jakim_cache.json: the authoritative month snapshot (program-owned)
- zones_cache.json: the JAKIM zone table (program-owned)
- settings.yaml:    user preferences (user-editable)

Loads never raise: a missing or corrupt file is a cache miss (None) or the
default settings. Writes go through a temp file and an atomic rename.
"""
import json
from pathlib import Path
from typing import Any

import yaml
from loguru import logger
from pydantic import ValidationError

from .engine.models import PrayerCache, Zone
from .user_settings import UserSettings

logger = logger.bind(module="store")


def _write_atomic(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.with_suffix(".tmp")
    with open(temp_path, "w", encoding="utf-8") as f:
        f.write(text)
    temp_path.replace(path)


def _read_json(path: Path) -> Any | None:
    if not path.exists():
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"Failed to read {path}: {e}")
        return None


class CacheStore:
    """JSON files for the prayer cache and the zone table"""

    def __init__(self, data_dir: str | Path):
        """Initialize store.

        Args:
            data_dir: Directory holding jakim_cache.json and zones_cache.json
        """
        self.data_dir = Path(data_dir).expanduser()
        self.cache_path = self.data_dir / "jakim_cache.json"
        self.zones_path = self.data_dir / "zones_cache.json"

    # ============== Prayer cache ==============

    def load_cache(self) -> PrayerCache | None:
        data = _read_json(self.cache_path)
        if data is None:
            return None
        try:
            cache = PrayerCache.from_dict(data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Corrupt prayer cache ignored: {e}")
            return None
        logger.info(f"Loaded prayer cache: zone={cache.zone} month={cache.month_tag}")
        return cache

    def save_cache(self, cache: PrayerCache) -> None:
        _write_atomic(self.cache_path, json.dumps(cache.to_dict()))
        logger.info(f"Prayer cache saved for {cache.zone}")

    # ============== Zones ==============

    def load_zones(self) -> dict[str, Zone] | None:
        data = _read_json(self.zones_path)
        if data is None:
            return None
        try:
            zones = [Zone.from_dict(z) for z in data]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Corrupt zones cache ignored: {e}")
            return None
        return {z.code: z for z in zones}

    def save_zones(self, zones: list[Zone]) -> None:
        _write_atomic(self.zones_path, json.dumps([z.to_dict() for z in zones]))
        logger.info(f"Zones cache saved: {len(zones)} zones")


class SettingsStore:
    """YAML-backed user settings"""

    def __init__(self, data_dir: str | Path):
        self.data_dir = Path(data_dir).expanduser()
        self.yaml_path = self.data_dir / "settings.yaml"

    def load(self) -> UserSettings:
        """Current settings; defaults when the file is missing or invalid."""
        if not self.yaml_path.exists():
            return UserSettings()

        try:
            with open(self.yaml_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            return UserSettings.model_validate(data)
        except (OSError, yaml.YAMLError, ValidationError) as e:
            logger.error(f"Failed to load settings, using defaults: {e}")
            return UserSettings()

    def save(self, user_settings: UserSettings) -> None:
        text = "# Sajda user settings\n\n" + yaml.dump(
            user_settings.model_dump(),
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
        )
        _write_atomic(self.yaml_path, text)
        logger.debug(f"Settings saved to {self.yaml_path}")

    def update(self, **changes: Any) -> UserSettings:
        """Load, apply field changes, save and return the new settings."""
        updated = self.load().model_copy(update=changes)
        self.save(updated)
        return updated
