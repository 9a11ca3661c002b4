"""Application configuration loaded from environment variables."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global application settings."""

    index_path: str = Field(
        default="docs/build/search_index.js",
        description="Search index produced by the documentation build.",
    )
    json_output_path: str = "data/search_index.json"
    bm25_index_dir: str = "data/bm25_index"
    js_variable_name: str = "documenterSearchIndex"

    default_top_k: int = 20
    title_boost: float = 2.0
    page_boost: float = 1.5
    text_boost: float = 1.0

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def index_path_obj(self) -> Path:
        return Path(self.index_path)

    @property
    def json_output_path_obj(self) -> Path:
        return Path(self.json_output_path)

    @property
    def bm25_index_path_obj(self) -> Path:
        return Path(self.bm25_index_dir)


settings = Settings()
