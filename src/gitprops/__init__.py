"""gitprops - expose git repository metadata as build properties."""

__version__ = "0.1.0"

from .api import collect_git_properties
from .config import ExtractionConfig
from .errors import (
	ConfigReadError,
	ExtractionError,
	FormatError,
	GitPropsError,
	HeadResolutionError,
	RepositoryNotFoundError,
)
from .git.models import PropertyMap

__all__ = [
	"ConfigReadError",
	"ExtractionConfig",
	"ExtractionError",
	"FormatError",
	"GitPropsError",
	"HeadResolutionError",
	"PropertyMap",
	"RepositoryNotFoundError",
	"collect_git_properties",
]
