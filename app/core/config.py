from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    HTTP_TIMEOUT_SECONDS: float = 10.0

    # "supabase", "json" or "memory"; empty picks supabase when credentials exist
    STORE_PROVIDER: str = ""
    DATA_DIR: str = "./data"

    SUPABASE_URL: str | None = None
    SUPABASE_SERVICE_ROLE_KEY: str | None = None
    SUPABASE_BOOKINGS_TABLE: str = "bookings"

    GOOGLE_CLIENT_ID: str | None = None
    GOOGLE_CLIENT_SECRET: str | None = None
    GOOGLE_REDIRECT_URI: str | None = None
    GOOGLE_REFRESH_TOKEN: str | None = None
    EMAIL_SENDER: str | None = None

    DROPBOX_ACCESS_TOKEN: str | None = None
    DROPBOX_CLIENT_ID: str | None = None
    DROPBOX_CLIENT_SECRET: str | None = None
    DROPBOX_REFRESH_TOKEN: str | None = None
    DROPBOX_REDIRECT_URI: str | None = None
    DROPBOX_PROJECTS_ROOT: str = "/Projects"

    POLLING_ENABLED: bool = True
    POLLING_INTERVAL_SECONDS: float = 30.0

    BUSINESS_NAME: str = "RePhotos"
    BUSINESS_SIGNATURE: str = "Cooper\nRephotos.ca"


settings = Settings()
