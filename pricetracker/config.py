"""Application configuration via Pydantic Settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global scraper settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    # App
    LOG_LEVEL: str = "INFO"

    # Browser
    BROWSER_HEADLESS: bool = True
    NAVIGATION_TIMEOUT_MS: int = 30000
    VIEWPORT_WIDTH: int = 1920
    VIEWPORT_HEIGHT: int = 1080
    BROWSER_LOCALE: str = "es-AR"

    # Diagnostics: screenshots are only written when a directory is set
    SCREENSHOT_DIR: str = ""

    # Backoff before the single retry after a transient automation error
    TRANSIENT_RETRY_BACKOFF_SECONDS: float = 2.0

    # Progress channel
    PROGRESS_QUEUE_SIZE: int = 100

    # Persistence API that receives scraped records.
    # An empty INGEST_URL disables posting.
    INGEST_URL: str = ""
    INGEST_API_KEY: str = ""

    def get_viewport(self) -> dict:
        """Viewport mapping in the shape Playwright expects."""
        return {"width": self.VIEWPORT_WIDTH, "height": self.VIEWPORT_HEIGHT}


settings = Settings()
