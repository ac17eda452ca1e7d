from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    TMDB_TOKEN: Optional[str] = None
    TMDB_BASE_URL: str = 'https://api.themoviedb.org/3'
    TMDB_IMAGE_BASE: str = 'https://image.tmdb.org/t/p'
    HTTP_TIMEOUT: float = 10.0

    DEBOUNCE_MS: int = 500
    MAX_TOTAL_PAGES: int = 500
    PLACEHOLDER_COUNT: int = 12
    OVERVIEW_MAX_CHARS: int = 180

    LOG_LEVEL: str = 'INFO'

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore"
    )

    @property
    def has_token(self) -> bool:
        return bool(self.TMDB_TOKEN and self.TMDB_TOKEN.strip())


settings = Settings()
