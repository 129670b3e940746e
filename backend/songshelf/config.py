"""Application configuration"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Database
    database_url: str = "sqlite:///./data/songshelf.db"

    # Uploads (audio files and extracted cover art)
    upload_dir: str = "./uploads"
    upload_url_prefix: str = "/uploads"
    max_upload_size: int = 50 * 1024 * 1024  # 50MB
    allowed_audio_extensions: str = ".mp3,.wav,.flac,.m4a,.aac,.ogg"

    # Auth
    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7

    # Runtime environment ("production" hides stack traces in error bodies)
    environment: str = "development"

    # API Configuration
    cors_origins: str = "http://localhost:5173,http://localhost:3000"

    # Server Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 3001

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins string into list"""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def allowed_extensions_list(self) -> List[str]:
        """Parse allowed audio extensions into a lowercase list"""
        return [ext.strip().lower() for ext in self.allowed_audio_extensions.split(",") if ext.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def audio_dir(self) -> Path:
        return Path(self.upload_dir) / "audio"

    @property
    def covers_dir(self) -> Path:
        return Path(self.upload_dir) / "covers"

    def resolve_upload_path(self, url_path: str) -> Path:
        """
        Map a retrieval path such as "/uploads/audio/x.mp3" to its location on disk

        Args:
            url_path: Path as stored on a Song record

        Returns:
            Filesystem path inside the upload directory
        """
        relative = url_path
        if relative.startswith(self.upload_url_prefix):
            relative = relative[len(self.upload_url_prefix):]
        return Path(self.upload_dir) / relative.lstrip("/")


# Global settings instance
settings = Settings()
