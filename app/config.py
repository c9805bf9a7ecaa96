# app/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    database_url: str = Field(
        "sqlite:///./advisor_prep.db", validation_alias="DATABASE_URL"
    )

    openai_api_key: str | None = Field(None, validation_alias="OPENAI_API_KEY")
    openai_base_url: str | None = Field(None, validation_alias="OPENAI_BASE_URL")
    llm_model: str = Field("gpt-4o-mini", validation_alias="LLM_MODEL")
    llm_timeout_seconds: float = Field(60.0, validation_alias="LLM_TIMEOUT_SECONDS")

    # Upper bound on document text sent to the sufficiency assessment
    max_doc_chars: int = Field(120_000, validation_alias="MAX_DOC_CHARS")

    advisor_dashboard_password: str | None = Field(
        None, validation_alias="ADVISOR_DASHBOARD_PASSWORD"
    )

    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")
    cors_origins: str = Field("*", validation_alias="CORS_ORIGINS")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
