"""Pydantic Settings loaded from environment."""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    classify_timeout_seconds: float = 8.0
    classify_max_image_side: int = 1600
    token_prefix: str = "TT"
    token_region: str = "IND"
    cors_origins: str = "http://localhost:3000,http://localhost:5173"
    media_base_url: str = ""
    upload_dir: str = "/tmp/trashtrack-uploads"
    geocoder_url: str = "https://nominatim.openstreetmap.org/reverse"
    geocoder_user_agent: str = "TrashTrack/1.0 (contact: support@trashtrack.local)"

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


settings = Settings()
