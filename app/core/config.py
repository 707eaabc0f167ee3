from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "local"
    APP_NAME: str = "Trekbook API"
    SITE_NAME: str = "Trekbook Adventures"
    # Comma-separated origins for CORS (e.g. https://trekbook.in,https://admin.trekbook.in). If empty, uses localhost defaults.
    CORS_ORIGINS: str = ""
    LOG_LEVEL: str = "INFO"

    SECRET_KEY: str
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    DATABASE_URL: str

    @field_validator("DATABASE_URL", mode="after")
    @classmethod
    def normalize_database_url(cls, v: str) -> str:
        """Render and others give postgres://; SQLAlchemy expects postgresql+psycopg2://."""
        if v and v.startswith("postgres://"):
            return "postgresql+psycopg2://" + v[11:]
        return v
    REDIS_URL: str = "redis://localhost:6379/0"

    SMTP_HOST: str = "localhost"
    SMTP_PORT: int = 25
    SMTP_USERNAME: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_FROM: str = "bookings@trekbook.local"

    SENDGRID_API_KEY: str = ""
    SENDGRID_FROM_EMAIL: str = ""

    # Booking notifications go to this WhatsApp number (digits only, with country code)
    ADMIN_WHATSAPP: str = "918129464465"
    CURRENCY_SYMBOL: str = "₹"

    # Try SMTP/SendGrid inline when queueing; otherwise the Celery worker picks it up
    EMAIL_SEND_IMMEDIATELY: bool = True
    EMAIL_RETRY_INTERVAL_SECONDS: float = 120.0
    CELERY_TIMEZONE: str = "Asia/Kolkata"

    # start_api.py / wait_for_db.py
    DB_WAIT_TIMEOUT: int = 60

    # Seed admin (start_api.py / app.seed)
    SEED_ADMIN_EMAIL: str = "admin@trekbook.local"
    SEED_ADMIN_PASSWORD: str = "Admin12345"


settings = Settings()
