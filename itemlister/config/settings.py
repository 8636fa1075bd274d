from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    host: str = "0.0.0.0"
    port: int = 3001

    upload_dir: str = "./uploads"
    max_upload_bytes: int = 10 * 1024 * 1024

    generation_provider: str = "gemini"
    gemini_api_key: str = ""
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_timeout_seconds: int = 60
    openai_api_key: str = ""
    openai_base_url: str | None = None
    openai_timeout_seconds: int = 30
    # Empty uses the provider adapter's own defaults.
    generation_fallback_models: list[str] = Field(default_factory=list)
    generation_max_attempts: int = 3
    generation_base_delay_ms: int = 500

    normalization_temperature: float = 0.2
    normalization_max_output_tokens: int = 2000
    listing_temperature: float = 0.2
    listing_max_output_tokens: int = 1000
    book_listing_max_output_tokens: int = 2048

    ocr_provider: str = "google_vision"
    google_vision_api_key: str = ""
    google_vision_base_url: str = "https://vision.googleapis.com/v1"
    ocr_timeout_seconds: int = 30

    sheets_credentials_file: str = "./credentials/google-sheets-credentials.json"
    sheets_credentials_json: str = ""
    card_spreadsheet_id: str = ""
    card_sheet_name: str = "Cards"
    book_spreadsheet_id: str = ""
    book_sheet_name: str = "book title"

    background_workers: int = 4

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"
