from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Application
    app_name: str = "Galaxy Genius"
    debug: bool = False

    # CORS
    frontend_url: str = "http://localhost:5173"

    # Flow selection
    flow_candidate_count: int = 24
    flow_top_pool_size: int = 5
    recent_history_size: int = 6
    debug_flow_difficulty: bool = False

    # Puzzle selection
    puzzle_candidate_count: int = 24
    puzzle_top_pool_size: int = 6

    # Caller-side history helpers (one gameplay run is 12 items)
    used_id_window: int = 12

    # Telemetry
    enable_telemetry: bool = True

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "GG_"


@lru_cache
def get_settings() -> Settings:
    return Settings()
