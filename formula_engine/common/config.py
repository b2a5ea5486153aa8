"""Engine configuration."""
import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from formula_engine.core.trie import MatchPolicy


class EngineConfig(BaseModel):
    """
    Settings shared by an ExpressionParser and the sheet tooling built on it.

    The instance is immutable so that the symbol matching policy cannot change
    underneath a parser that has already built its tries.
    """

    model_config = ConfigDict(frozen=True)

    match_policy: MatchPolicy = Field(
        default=MatchPolicy.LONGEST,
        description="How operator and function symbols are matched when one symbol prefixes another",
    )
    log_level: Optional[str] = Field(
        default=None,
        description="Level applied to the formula_engine logger; None keeps the current level",
    )

    @field_validator("log_level")
    def log_level_must_exist(cls, v: Optional[str]) -> Optional[str]:
        """Ensure that the log level is a standard logging level name."""
        if v is None:
            return v
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level
