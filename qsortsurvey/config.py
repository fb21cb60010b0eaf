from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "Q-Sort Survey"
    debug: bool = False

    # Workbook with the Teams, Versions and Cards sheets (read-only)
    details_path: Path = Path("qsort_details.xlsx")

    # Where submissions are appended
    submission_backend: Literal["csv", "database"] = "csv"
    submissions_path: Path = Path("qsort_data.csv")
    database_url: str = "sqlite+aiosqlite:///./qsort.db"

    # Front end bundle served at "/" when set
    static_dir: Path | None = None


settings = Settings()


# =============================================================================
# SURVEY RULES
# =============================================================================

# Versions with fewer cards than this are never offered to a team
MIN_VERSION_CARDS = 5
