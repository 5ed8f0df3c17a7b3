from decimal import Decimal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    REDIS_URL: str = "redis://localhost:6379/0"
    QUOTE_CACHE_TTL: int = 60  # seconds

    DEFAULT_VAT_RATE: Decimal = Decimal("23")
    # Historical quotes were totalled from per-field rounded values
    ROUND_EACH_COMPONENT: bool = True

    FALLBACK_PRICE_PER_DAY: Decimal = Decimal("100")

    SERVICE_RATE_PER_TECHNICIAN: Decimal = Decimal("150")
    TRAVEL_RATE_PER_KM: Decimal = Decimal("1.15")
    TECHNICIAN_COUNT: int = 1

    CATALOG_SERVICE_RATE_PER_TECHNICIAN: Decimal = Decimal("100")
    CATALOG_TRAVEL_RATE_PER_KM: Decimal = Decimal("2.50")

    FUEL_PRICE_PER_LITER: Decimal = Decimal("6.50")
    HOURS_PER_DAY: int = 8

    API_TITLE: str = "Rental Quote Pricing Service"
    API_DESCRIPTION: str = "Pricing and quote composition for equipment rental"
    API_VERSION: str = "1.0.0"

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False
    DEBUG: bool = False

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
