from pydantic_settings import BaseSettings
from pydantic import ConfigDict

class Settings(BaseSettings):
    model_config = ConfigDict(env_file=".env", extra="ignore")

    ENV: str = "development"

    DATABASE_URL: str
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    # SMTP transport for one-time codes
    MAIL_USERNAME: str = ""
    MAIL_PASSWORD: str = ""
    MAIL_FROM: str = "Anvi Studio Support <no-reply@anvistudio.local>"
    MAIL_SERVER: str = "localhost"
    MAIL_PORT: int = 587
    MAIL_TIMEOUT_SECONDS: int = 10
    OTP_EXPIRE_MINUTES: int = 10

    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    # Storefront / payment gateway
    APP_BASE_URL: str = "http://localhost:8000"
    PLACEHOLDER_IMAGE_URL: str = "https://placehold.co/600x600"
    STRIPE_SECRET_KEY: str = ""
    STRIPE_PUBLISHABLE_KEY: str = ""
    STRIPE_CURRENCY: str = "inr"
    STRIPE_TIMEOUT_SECONDS: int = 15
    PAYMENT_VERIFY_SESSION: bool = True
    CURRENCY_SYMBOL: str = "₹"

    # Seeded on first start, must be rotated after the first login
    ADMIN_BOOTSTRAP_USERNAME: str = "admin"
    ADMIN_BOOTSTRAP_PASSWORD: str = "password123"


settings = Settings()
