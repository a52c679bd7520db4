from pydantic_settings import BaseSettings
from functools import lru_cache
import os


class Settings(BaseSettings):
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_table: str = "analyses"

    # Render defaults
    page_load_timeout: int = 30000  # milliseconds
    viewport_width: int = 1920
    viewport_height: int = 1080
    user_agent: str = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/131.0.0.0 Safari/537.36"
    )

    # Heatmap
    max_heatmap_points: int = 50
    min_point_value: float = 0.2
    dedupe_distance: int = 50  # px, both axes

    # Screenshots are sent as PNG unless compression is on
    compress_screenshots: bool = False
    screenshot_max_width: int = 1280
    screenshot_quality: int = 75

    # Reuse a stored report for the same URL within this window (0 disables)
    cache_ttl_seconds: int = 3600

    log_level: str = "INFO"

    class Config:
        # Look for .env in the repo root (two levels up from backend/pagelens/)
        _env_path = os.path.join(os.path.dirname(__file__), "..", "..", ".env")
        env_file = _env_path if os.path.exists(_env_path) else None
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings():
    return Settings()
