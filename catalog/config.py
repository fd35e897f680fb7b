from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""
    PROJECT_NAME: str = "Live Catalog"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # Storage
    PRODUCTS_FILE: str = "products.json"

    # Logging
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(case_sensitive=True, env_file=".env")


settings = Settings()
