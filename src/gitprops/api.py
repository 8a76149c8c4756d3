"""High level entry point used by build integrations and the CLI."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gitprops.config.config_schema import ExtractionConfig
from gitprops.git.extractor import MetadataExtractor
from gitprops.git.locator import locate
from gitprops.utils.log_setup import log_properties

if TYPE_CHECKING:
	from collections.abc import Mapping
	from pathlib import Path

	from gitprops.git.models import PropertyMap

logger = logging.getLogger(__name__)


def collect_git_properties(
	config: ExtractionConfig | None = None,
	project_root: Path | None = None,
	environ: Mapping[str, str] | None = None,
) -> PropertyMap:
	"""
	Locate the repository and extract its properties.

	The date format is checked before the repository is touched, and the
	repository is released before returning, whether extraction succeeded or
	not. Either every property is returned or an error is raised.

	Args:
		config: Extraction settings; defaults are used when omitted
		project_root: Fallback directory when ``config.base_dir`` is unset
		environ: Environment to read, defaults to ``os.environ``

	Returns:
		The extracted properties

	Raises:
		FormatError: If the date format or time zone is invalid
		RepositoryNotFoundError: If no repository can be found
		ExtractionError: If the repository cannot be read
	"""
	config = config or ExtractionConfig()
	extractor = MetadataExtractor(config.prefix, config.date_format, config.timezone)

	with locate(
		config.base_dir,
		config.env_overrides,
		project_root=project_root,
		environ=environ,
	) as handle:
		properties = extractor.extract(handle)

	logger.debug("Extracted %d properties from %s", len(properties), handle.root)
	log_properties(properties, config.verbose)
	return properties
