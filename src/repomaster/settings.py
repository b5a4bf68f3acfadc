from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidatorFunctionWrapHandler, field_validator

from repomaster.filters import Disabled, RecentFilter, parse_recent


class Settings(BaseModel):
    """Configuration settings for one repomaster run."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    paths: list[Path] = Field(..., min_length=1, description="Files or directories to package.")
    output: Path | None = Field(default=None, description="Output file; stdout when unset.")
    no_gitignore: bool = Field(default=False, description="Do not honor .gitignore rules.")
    line_numbers: bool = Field(default=False, description="Prefix content lines with numbers.")
    recent: RecentFilter = Field(default_factory=Disabled, description="Recency filter.")
    grep: str | None = Field(default=None, description="Keep files whose content matches.")
    include: list[str] = Field(default_factory=list, description="Include globs.")
    config: Path | None = Field(default=None, description="Config file path.")
    log_file: str = Field(default="", description="Log file path.")

    @field_validator("recent", mode="wrap")
    @classmethod
    def _decide_recent(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> RecentFilter:  # noqa: ANN401, ARG003
        return parse_recent(value)

    @field_validator("include", mode="before")
    @classmethod
    def _split_include(cls, value: Any) -> list[str]:  # noqa: ANN401
        if value is None:
            return []
        if isinstance(value, str):
            value = [value]
        return [part.strip() for item in value for part in str(item).split(",") if part.strip()]

    @field_validator("grep", mode="before")
    @classmethod
    def _empty_grep_is_none(cls, value: Any) -> str | None:  # noqa: ANN401
        if value is None or value is False:
            return None
        text = str(value)
        return text or None

    @property
    def use_gitignore(self) -> bool:
        return not self.no_gitignore
