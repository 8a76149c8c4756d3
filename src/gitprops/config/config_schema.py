"""Pydantic schemas for gitprops configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from gitprops.utils.formatting import DEFAULT_DATE_FORMAT

OutputFormat = Literal["properties", "json", "yaml", "env"]


class ExtractionConfig(BaseModel):
	"""Settings for a single property extraction."""

	base_dir: Path | None = None
	prefix: str = "git"
	date_format: str = DEFAULT_DATE_FORMAT
	timezone: str | None = None
	verbose: bool = False
	env_overrides: bool = True

	@field_validator("prefix")
	@classmethod
	def _check_prefix(cls, value: str) -> str:
		if not value:
			msg = "prefix must not be empty"
			raise ValueError(msg)
		if any(char.isspace() for char in value):
			msg = f"prefix '{value}' must not contain whitespace"
			raise ValueError(msg)
		if value.startswith(".") or value.endswith("."):
			msg = f"prefix '{value}' must not start or end with a dot"
			raise ValueError(msg)
		return value


class OutputConfig(BaseModel):
	"""Where and how extracted properties are written."""

	format: OutputFormat = "properties"
	file: Path | None = None


class AppConfigSchema(BaseModel):
	"""Root of the gitprops configuration file."""

	extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
	output: OutputConfig = Field(default_factory=OutputConfig)
