"""Application settings loaded from environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Server
    host: str = "0.0.0.0"
    port: int = 5000
    api_prefix: str = "/api"

    # Body parsing
    body_limit: int = 100 * 1024
    json_strict: bool = True
    urlencoded_extended: bool = True
    parameter_limit: int = 1000

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def base_url(self) -> str:
        return f"http://localhost:{self.port}"


settings = Settings()
