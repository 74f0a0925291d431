from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from runlog.core.constants import DEFAULT_REMINDER_DAYS, MILESTONES
from runlog.schemas.notification import NotificationPreferences, check_thresholds


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Reference API storage
    database_url: str = "sqlite+pysqlite:///./runlog.db"
    # Examples: "America/New_York", "Europe/London", or "local" to use system tz.
    timezone: str = "local"

    # Client side: where the goals API lives and how to authenticate
    api_base_url: str = "http://localhost:8000"
    api_token: str | None = None
    request_timeout: float = 10.0

    log_level: str = "INFO"

    # Notification defaults
    enable_milestone_notifications: bool = True
    enable_deadline_reminders: bool = True
    deadline_reminder_days: int = DEFAULT_REMINDER_DAYS
    deadline_reminder_policy: Literal["daily", "window"] = "daily"
    milestone_thresholds: list[int] = list(MILESTONES)

    # Allow empty env strings for optional fields
    @field_validator("api_token", mode="before")
    @classmethod
    def _empty_to_none(cls, v):
        if v in ("", None, "null", "None"):
            return None
        return v

    @field_validator("milestone_thresholds")
    @classmethod
    def _check_thresholds(cls, v: list[int]) -> list[int]:
        return check_thresholds(v)

    def notification_preferences(self) -> NotificationPreferences:
        """Snapshot of the notification settings, passed explicitly to detectors."""
        return NotificationPreferences(
            enable_milestone_notifications=self.enable_milestone_notifications,
            enable_deadline_reminders=self.enable_deadline_reminders,
            deadline_reminder_days=self.deadline_reminder_days,
            deadline_reminder_policy=self.deadline_reminder_policy,
            milestone_thresholds=self.milestone_thresholds,
        )


settings = Settings()
