"""Configuration - daemon settings loaded from the environment / .env"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
load_dotenv(override=True)


def _optional_float(name: str) -> Optional[float]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    return float(raw)


@dataclass
class Settings:
    """Daemon settings"""

    # HTTP API
    host: str = "127.0.0.1"
    port: int = 8790
    debug: bool = False

    # Cache files, user settings and logs live here
    data_dir: Path = field(default_factory=lambda: Path.home() / ".sajda")

    # Authoritative feed (JAKIM via waktusolat.app)
    api_base: str = "https://api.waktusolat.app/v2/solat/gps"
    zones_url: str = "https://api.waktusolat.app/zones"
    http_timeout_seconds: float = 15.0

    # Static location; the HTTP API can push a new one at runtime
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    # Ticker
    tick_interval_seconds: float = 1.0
    wake_threshold_seconds: float = 5.0

    # Background jobs
    refetch_check_minutes: int = 30
    zones_refresh_hours: int = 24

    # Alerts
    alert_webhook_url: Optional[str] = None

    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables"""
        return cls(
            # HTTP API
            host=os.getenv("HOST", "127.0.0.1"),
            port=int(os.getenv("PORT", "8790")),
            debug=os.getenv("DEBUG", "").lower() in ("1", "true"),

            # Paths
            data_dir=Path(os.getenv(
                "SAJDA_DATA_DIR", str(Path.home() / ".sajda")
            )),

            # Feed
            api_base=os.getenv("SAJDA_API_BASE", "https://api.waktusolat.app/v2/solat/gps"),
            zones_url=os.getenv("SAJDA_ZONES_URL", "https://api.waktusolat.app/zones"),
            http_timeout_seconds=float(os.getenv("SAJDA_HTTP_TIMEOUT", "15")),

            # Location
            latitude=_optional_float("SAJDA_LATITUDE"),
            longitude=_optional_float("SAJDA_LONGITUDE"),

            # Ticker
            tick_interval_seconds=float(os.getenv("SAJDA_TICK_INTERVAL", "1.0")),
            wake_threshold_seconds=float(os.getenv("SAJDA_WAKE_THRESHOLD", "5.0")),

            # Jobs
            refetch_check_minutes=int(os.getenv("SAJDA_REFETCH_CHECK_MINUTES", "30")),
            zones_refresh_hours=int(os.getenv("SAJDA_ZONES_REFRESH_HOURS", "24")),

            alert_webhook_url=os.getenv("SAJDA_ALERT_WEBHOOK_URL") or None,
            log_level=os.getenv("SAJDA_LOG_LEVEL", "INFO").upper(),
        )

    @property
    def coordinates(self) -> Optional[tuple[float, float]]:
        """Configured (lat, lng), or None unless both are set."""
        if self.latitude is None or self.longitude is None:
            return None
        return (self.latitude, self.longitude)


# Global settings instance
settings = Settings.from_env()
