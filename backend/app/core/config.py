from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "Salon Directory API"
    version: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    APP_DATABASE_DSN: str = "sqlite:////tmp/salons.db"
    REDIS_URL: str = "redis://localhost:6379"

    # Bearer tokens
    JWT_SECRET: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRES_MINUTES: int = 60 * 24 * 7

    # Object storage: "local" or "s3"
    STORAGE_BACKEND: str = "local"
    UPLOAD_DIR: str = "uploads"
    PUBLIC_BASE_URL: str = ""  # prefix for local URLs, e.g. https://api.example.com
    S3_BUCKET_NAME: str = ""
    S3_REGION: str = ""
    S3_BASE_URL: str = ""

    # Coupon ledger policy
    COUPON_PURCHASE_REQUIRES_MEMBERSHIP: bool = True
    COUPON_REDEMPTION_REQUIRES_MEMBERSHIP: bool = False
    COUPON_ENFORCE_MAX_USAGE: bool = True

    # Expired coupon sweep runs at midnight in this timezone
    SWEEP_TIMEZONE: str = "Asia/Kolkata"

    # CORS
    CORS_ORIGINS: str = "http://localhost:4200"

    # Rate limiting
    RATE_LIMIT_REQUESTS_PER_MINUTE: int = 200


settings = Settings()
