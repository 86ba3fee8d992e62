from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration for application"""
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash-exp"
    temperature: float = Field(default=0.2, validation_alias="GEMINI_TEMPERATURE")

    host: str = "0.0.0.0"
    port: int = 3000
    public_url: str | None = Field(
        default=None, validation_alias=AliasChoices("PUBLIC_URL", "RENDER_EXTERNAL_URL")
    )
    cors_origins: list[str] = ["*"]
    log_level: str = "INFO"

    # Upstream call bound, in seconds
    analysis_timeout: float = Field(default=45.0, gt=0)
    max_text_length: int = Field(default=5000, gt=0)
    min_text_length: int = Field(default=50, ge=0)

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def has_credentials(self) -> bool:
        """Whether a provider API key is configured."""
        return bool(self.gemini_api_key.strip())

    @property
    def base_url(self) -> str:
        """Base URL advertised in startup logs."""
        return (self.public_url or f"http://localhost:{self.port}").rstrip("/")

    def get_model_path(self) -> str:
        """Get the LiteLLM route for the configured Gemini model."""
        return f"gemini/{self.gemini_model}"


settings = Settings()
