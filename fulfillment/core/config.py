from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # --- Service ---
    PROJECT_NAME: str = "Order_Fulfillment"
    LOG_LEVEL: str = "INFO"

    # --- Storage ---
    DATABASE_URL: str = "sqlite:///./orders.db"
    REDIS_URL: str | None = None
    REPORT_CACHE_TTL: int = 60  # seconds

    # --- Tickets ---
    TIMEZONE: str = "UTC"
    CURRENCY_SYMBOL: str = "$"
    TICKET_WIDTH: int = 40
    PRINT_SPOOL_DIR: str | None = None

    # --- Staff notifications (optional) ---
    TWILIO_ACCOUNT_SID: str | None = None
    TWILIO_AUTH_TOKEN: str | None = None
    TWILIO_FROM_NUMBER: str | None = None
    ADMIN_PHONE_NUMBER: str | None = None
    NOTIFY_STATUSES: str = "ready,cancelled"

    # --- Configuration ---
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore"  # unknown variables in .env are not an error
    )

    @property
    def notify_statuses(self) -> set[str]:
        return {s.strip() for s in self.NOTIFY_STATUSES.split(",") if s.strip()}

settings = Settings()
