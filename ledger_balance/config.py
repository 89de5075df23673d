"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "ledger-balance"
    log_level: str = "INFO"

    # Ledger policy
    never_overdue_net_days: int = 999  # netD sentinel stamped on generated fee rows
    net_balance_places: int = 2


settings = Settings()
