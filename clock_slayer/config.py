"""Application configuration using Pydantic Settings."""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # MongoDB
    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_db_name: str = "clock_slayer"

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 3000
    debug: bool = False
    log_level: str = "INFO"

    # CORS
    cors_origins: str = "http://localhost:3000,http://localhost:5173"

    # Resend (outbound e-mail)
    resend_api_key: str = ""
    resend_api_url: str = "https://api.resend.com/emails"
    report_sender: str = "Clock Slayer <onboarding@resend.dev>"
    report_recipients: str = ""

    # Weekly report
    report_scheduler_enabled: bool = True
    report_day_of_week: str = "friday"
    report_time: str = "20:44"
    report_timezone: str = "America/Denver"
    report_window_days: int = 7
    report_closed_window: bool = False  # False: only a lower bound is applied

    # Timeouts (seconds)
    store_timeout_seconds: float = 30.0
    delivery_timeout_seconds: float = 30.0

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def report_recipients_list(self) -> list[str]:
        """Parse report recipients from comma-separated string."""
        return [r.strip() for r in self.report_recipients.split(",") if r.strip()]


settings = Settings()
