"""Configuration management for stagesearch."""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _sanitize_secret(value: str) -> str:
    """Remove BOM characters and whitespace from secrets.

    Secrets mounted from files or pasted into environment variables may carry
    a BOM that breaks HTTP headers sent to the search cluster.
    """
    if not value:
        return value
    return value.lstrip("\ufeff").strip()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Elasticsearch settings
    elasticsearch_url: str = "http://localhost:9200"
    elasticsearch_api_key: str = ""
    index_name: str = "stagesearch"
    request_timeout: int = 30

    # Operator access for the HTTP reindex trigger
    admin_token: str = ""

    @field_validator("elasticsearch_api_key", "admin_token", "elasticsearch_url", mode="after")
    @classmethod
    def sanitize_secrets(cls, value: str) -> str:
        """Remove BOM and whitespace from secret values."""
        return _sanitize_secret(value)

    # Content store wiring, as "package.module:callable"
    content_store_factory: str = ""

    # Search behaviour
    default_stage: str = "Live"
    results_per_page: int = 10
    expanded_result_count: int = 5
    max_hierarchy_depth: int = 50

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    @property
    def has_admin_token(self) -> bool:
        """Whether the HTTP reindex trigger can be used at all."""
        return bool(self.admin_token)


# Global settings instance
settings = Settings()
