from pydantic_settings import BaseSettings

from b2b_pricing.enums.commercial import SettlementMode

class Settings(BaseSettings):
    # DB
    DATABASE_URL: str = "sqlite:///./wholesale.db"

    # Security / JWT
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    # Pricing
    DEFAULT_SETTLEMENT_MODE: SettlementMode = SettlementMode.AUTO_LEDGER
    SLOW_PRICING_MS: float = 30.0

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
