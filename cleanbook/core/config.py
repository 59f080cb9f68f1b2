from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    BUSINESS_TIMEZONE: str = "Asia/Dubai"

    CURRENCY: str = "AED"
    VAT_RATE: float = 0.05
    CASH_FEE: int = 5
    FULL_WINDOW_PACKAGE_SERVICE_ID: int = 19

    CATALOG_TTL_SECONDS: float = 300.0

    DRAFT_STORE_DIR: str = "./data/drafts"
    DRAFT_NAMESPACE: str = "pending_booking"
    REORDER_NAMESPACE: str = "order_again"

    SUPABASE_URL: str | None = None
    SUPABASE_API_KEY: str | None = None
    BACKEND_BASE_URL: str | None = None

    NOMINATIM_BASE_URL: str = "https://nominatim.openstreetmap.org"
    NOMINATIM_USER_AGENT: str = "CleanBook/1.0"
    NOMINATIM_COUNTRY_CODES: str = "ae"
    ADDRESS_MAX_RESULTS: int = 6

    HTTP_TIMEOUT_SECONDS: float = 10.0

    CONFIRMATION_DELAY_SECONDS: float = 3.0
    ORDER_HISTORY_ROUTE: str = "/history"


settings = Settings()
