"""User preferences read by the ticker and the service."""
from pydantic import BaseModel, Field

from .engine.types import AlertMode, CalculationMethod


class UserSettings(BaseModel):
    """Preferences as stored in settings.yaml.

    Every field has a default so a partial file is still valid.
    """
    audio_settings: dict[str, str] = Field(default_factory=dict)  # prayer -> mute/chime/adhan
    adhan_selection: str = "Nasser"
    reminder_times: list[str] = Field(default_factory=lambda: ["09:00", "21:00"])
    alkahf_enabled: bool = True
    calculation_method: str = CalculationMethod.JAKIM.value
    reminders_enabled: bool = True
    random_reminders: bool = True

    def alert_mode(self, prayer: str) -> AlertMode:
        return AlertMode.parse(self.audio_settings.get(prayer))

    def method(self) -> CalculationMethod:
        return CalculationMethod.parse(self.calculation_method)
