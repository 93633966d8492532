"""CLI settings model."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CliSettings(BaseModel):
    """Settings for a cortex-cluster invocation."""
    model_config = ConfigDict(extra="ignore")
    
    log_level: str = Field(default="WARNING")
    max_prompt_attempts: int = Field(default=3, ge=1)
    
    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()
