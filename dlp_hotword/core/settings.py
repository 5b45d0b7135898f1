from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    ruleset_dir: str = Field(default="config/rulesets", alias="RULESET_DIR")
    default_window_before: int = Field(default=50, ge=0, alias="DEFAULT_WINDOW_BEFORE")
    default_info_types: list[str] = Field(default=["PERSON_NAME"], alias="DEFAULT_INFO_TYPES")
    min_likelihood: str = Field(default="VERY_UNLIKELY", alias="MIN_LIKELIHOOD")
    presidio_language: str = Field(default="en", alias="PRESIDIO_LANGUAGE")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
