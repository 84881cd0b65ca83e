"""Configuration for the consistency validator.

Thresholds can be overridden with KINSHIP_* environment variables.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ValidatorSettings(BaseSettings):
    """Thresholds used by the tree validation rules."""

    model_config = SettingsConfigDict(env_prefix="KINSHIP_", case_sensitive=False)

    # A parent must be at least this many (calendar) years older than the child
    min_parent_age: int = Field(default=12, ge=0)

    # Lifespans above this many years are flagged as suspicious
    max_lifespan: int = Field(default=120, ge=0)

    # First name the tree editor assigns to freshly added people
    placeholder_first_name: str = "New Person"


# Global settings instance
settings = ValidatorSettings()
