"""Configuration schemas and loading for gitprops."""

from .config_loader import ConfigError, ConfigFileNotFoundError, ConfigLoader, ConfigParsingError
from .config_schema import AppConfigSchema, ExtractionConfig, OutputConfig, OutputFormat

__all__ = [
	"AppConfigSchema",
	"ConfigError",
	"ConfigFileNotFoundError",
	"ConfigLoader",
	"ConfigParsingError",
	"ExtractionConfig",
	"OutputConfig",
	"OutputFormat",
]
