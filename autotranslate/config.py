from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    # Application settings
    app_name: str = "Autotranslate"
    app_version: str = "0.3.0"
    debug: bool = False
    environment: str = "development"

    # Database settings
    database_url: str = "sqlite://"

    # i18n settings
    default_language: str = "en"
    supported_languages: list[str] = ["en", "fr", "de", "es", "it", "ja", "zh"]

    # Automatic translation settings
    # Read at dispatch time, so flipping it at runtime switches inline/background execution.
    automatic_translation_asynchronously: bool = False
    translator_backend: str = "http"
    translator_url: str = "http://localhost:5000"
    translator_api_key: str | None = None
    translator_timeout_seconds: float = 30.0

    # Logging settings
    log_level: str = "INFO"
    log_json: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


settings = Settings()
