"""
Process settings read from ENGINE_* environment variables.

A ``.env`` file at the project root is loaded first (python-dotenv), so
local overrides never need exporting by hand. Rules that change how a game
resolves are copied into that game's RuleSet; nothing here is consulted
mid-resolution.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from infra.paths import ENV_FILE, LOG_DIR

ENV_PREFIX = "ENGINE_"


class EngineSettings(BaseModel):
    """Validated process settings; field names map to ENGINE_<NAME>."""
    log_level: str = Field(default="INFO", description="Root logging level")
    log_json: bool = Field(default=False, description="Emit JSON log lines")
    logfile: Optional[Path] = Field(default=LOG_DIR / "engine.log", description="Log file; empty disables it")
    strict: bool = Field(default=False, description="Raise on invariant violations instead of clamping")
    jump_heat_rule: Literal["fixed", "distance"] = Field(default="fixed", description="Jump heat formula")
    grid_width: int = Field(default=24, ge=1)
    grid_height: int = Field(default=24, ge=1)
    llm_model: str = Field(default="openrouter:x-ai/grok-4.1-fast", description="pydantic-ai model for the LLM commander")

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()

    @field_validator("logfile", mode="before")
    @classmethod
    def _empty_logfile(cls, value):
        if value in ("", "none", "None"):
            return None
        return value

    @classmethod
    def from_env(cls, env_file: Path | None = ENV_FILE) -> EngineSettings:
        """Load ``env_file`` (if present) and build settings from ENGINE_* variables."""
        if env_file is not None and env_file.exists():
            load_dotenv(env_file, override=False)
        values = {}
        for name in cls.model_fields:
            raw = os.getenv(f"{ENV_PREFIX}{name.upper()}")
            if raw is not None:
                values[name] = raw
        return cls(**values)


@lru_cache(maxsize=1)
def get_settings() -> EngineSettings:
    """Process-wide settings, read once."""
    return EngineSettings.from_env()
