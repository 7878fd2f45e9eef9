from os import environ
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Config(BaseModel):
    model_config = ConfigDict(frozen=True)

    aws_region: str
    database_url: str | None = None
    db_host: str
    db_port: int
    db_name: str
    db_user: str
    db_password: str
    db_secret_arn: str | None = None
    dynamodb_endpoint: str | None = None
    sessions_table: str
    backup_bucket: str = ""
    single_trip_price: int = Field(..., ge=0)
    round_trip_price: int = Field(..., ge=0)
    trip_timezone: str
    lock_timeout_ms: int = Field(..., gt=0)
    admin_chat_id: int | None = None
    telegram_webhook_secret: str = ""
    environment: str
    log_level: str = "INFO"

    @field_validator("trip_timezone")
    @classmethod
    def known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"unknown timezone: {value}") from e
        return value

    @model_validator(mode="after")
    def round_trip_covers_single(self) -> "Config":
        # The return leg is charged the difference, which must not be negative.
        if self.round_trip_price < self.single_trip_price:
            raise ValueError("round_trip_price must be >= single_trip_price")
        return self


_cached_config: Config | None = None


def _reset_config() -> None:
    """Reset cached config: for testing only."""
    global _cached_config
    _cached_config = None


def get_config() -> Config:
    global _cached_config
    if _cached_config is not None:
        return _cached_config

    _cached_config = Config(
        aws_region=environ.get("AWS_REGION", "us-east-1"),
        database_url=environ.get("DATABASE_URL") or None,
        db_host=environ.get("DB_HOST", "localhost"),
        db_port=environ.get("DB_PORT", "5432"),
        db_name=environ.get("DB_NAME", "angkot"),
        db_user=environ.get("DB_USER", "angkot"),
        db_password=environ.get("DB_PASSWORD", "localdev"),
        db_secret_arn=environ.get("DB_SECRET_ARN"),
        dynamodb_endpoint=environ.get("DYNAMODB_ENDPOINT"),
        sessions_table=environ.get("SESSIONS_TABLE", "ChatSessions"),
        backup_bucket=environ.get("BACKUP_BUCKET", ""),
        single_trip_price=environ.get("SINGLE_TRIP_PRICE", "10000"),
        round_trip_price=environ.get("ROUND_TRIP_PRICE", "18000"),
        trip_timezone=environ.get("TRIP_TIMEZONE", "Asia/Jakarta"),
        lock_timeout_ms=environ.get("LOCK_TIMEOUT_MS", "5000"),
        admin_chat_id=environ.get("ADMIN_CHAT_ID", "").strip() or None,
        telegram_webhook_secret=environ.get("TELEGRAM_WEBHOOK_SECRET", ""),
        environment=environ.get("ENVIRONMENT", "local"),
        log_level=environ.get("LOG_LEVEL", "INFO"),
    )
    return _cached_config
