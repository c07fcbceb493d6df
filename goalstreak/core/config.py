from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "postgresql://goalstreak:goalstreak@db:5432/goalstreak"
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Comma-separated allowed origins, or "*" to allow all.
    # Example: "https://myapp.com,https://api.myapp.com"
    CORS_ORIGINS: str = "*"

    # IANA zone used for every "today" comparison (streaks, ledger days, deadlines).
    TIMEZONE: str = "UTC"

    # Negative daily amounts are corrections; off unless the deployment allows them.
    ALLOW_NEGATIVE_PROGRESS: bool = False

    # Time of day stamped on generated goal reminders (HH:MM).
    REMINDER_TIME: str = "09:00"

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
