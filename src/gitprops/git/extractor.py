"""Read HEAD and local configuration into a property map."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pygit2 import Commit
from pygit2 import GitError as Pygit2GitError

from gitprops.errors import ConfigReadError, ExtractionError, HeadResolutionError
from gitprops.git.models import (
	BRANCH,
	BUILD_AUTHOR_EMAIL,
	BUILD_AUTHOR_NAME,
	COMMIT_AUTHOR_EMAIL,
	COMMIT_AUTHOR_NAME,
	COMMIT_ID,
	COMMIT_MESSAGE_FULL,
	COMMIT_MESSAGE_SHORT,
	COMMIT_TIME,
	PROPERTY_FIELDS,
	CommitRecord,
	PropertyMap,
)
from gitprops.utils.formatting import (
	DEFAULT_DATE_FORMAT,
	format_commit_time,
	property_key,
	resolve_timezone,
	validate_date_format,
)

if TYPE_CHECKING:
	from collections.abc import Mapping

	from pygit2 import Repository

	from gitprops.git.locator import RepositoryHandle

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "git"

USER_NAME_KEY = "user.name"
USER_EMAIL_KEY = "user.email"

AUTHOR_NAME_ENV = "GIT_AUTHOR_NAME"
AUTHOR_EMAIL_ENV = "GIT_AUTHOR_EMAIL"
EMAIL_ENV = "EMAIL"


def read_config_value(config: Any, key: str) -> str:  # noqa: ANN401
	"""
	Read a single configuration value.

	Args:
		config: A pygit2 ``Config`` or any mapping supporting ``in`` and ``[]``
		key: Dotted configuration key, e.g. ``user.name``

	Returns:
		The value, or an empty string when it is not set

	Raises:
		ConfigReadError: If the configuration cannot be read
	"""
	try:
		if key not in config:
			return ""
		value = config[key]
	except (Pygit2GitError, OSError) as e:
		msg = f"Failed to read '{key}' from the repository configuration: {e}"
		logger.exception(msg)
		raise ConfigReadError(msg) from e
	return value or ""


def resolve_build_identity(config: Any, environ: Mapping[str, str] | None = None) -> tuple[str, str]:  # noqa: ANN401
	"""
	Resolve the name and email of the user running the build.

	Follows git's precedence for the author identity when an environment is
	given: ``GIT_AUTHOR_NAME`` over ``user.name``, and ``GIT_AUTHOR_EMAIL`` over
	``user.email`` over ``EMAIL``.

	Args:
		config: The repository configuration
		environ: Environment to apply, or None to read the configuration only

	Returns:
		A ``(name, email)`` tuple; missing values are empty strings
	"""
	name = read_config_value(config, USER_NAME_KEY)
	email = read_config_value(config, USER_EMAIL_KEY)
	if environ is None:
		return name, email

	name = environ.get(AUTHOR_NAME_ENV) or name
	email = environ.get(AUTHOR_EMAIL_ENV) or email or environ.get(EMAIL_ENV, "")
	return name, email


def open_config(repo: Repository) -> Any:  # noqa: ANN401
	"""
	Open the repository's layered configuration.

	Raises:
		ConfigReadError: If a configuration file cannot be parsed
	"""
	try:
		return repo.config
	except (Pygit2GitError, OSError) as e:
		msg = f"Failed to open the configuration of repository '{repo.path}': {e}"
		logger.exception(msg)
		raise ConfigReadError(msg) from e


def resolve_head(repo: Repository) -> Commit:
	"""
	Resolve HEAD to a commit.

	Raises:
		HeadResolutionError: If HEAD is unborn or does not point to a commit
	"""
	try:
		if repo.head_is_unborn:
			msg = f"HEAD of repository '{repo.path}' has no commits yet"
			logger.error(msg)
			raise HeadResolutionError(msg)
		return repo.head.peel(Commit)
	except (Pygit2GitError, KeyError, ValueError) as e:
		msg = f"Could not resolve HEAD of repository '{repo.path}' to a commit: {e}"
		logger.exception(msg)
		raise HeadResolutionError(msg) from e


def resolve_branch(repo: Repository, commit_id: str) -> str:
	"""
	Get the short name of the checked out branch.

	A detached HEAD has no branch; the full commit id is returned instead.
	"""
	if repo.head_is_detached:
		logger.debug("HEAD is detached at %s", commit_id)
		return commit_id
	return repo.head.shorthand or ""


class MetadataExtractor:
	"""Turns the state of an opened repository into prefixed properties."""

	def __init__(
		self,
		prefix: str = DEFAULT_PREFIX,
		date_format: str = DEFAULT_DATE_FORMAT,
		timezone: str | None = None,
	) -> None:
		"""
		Initialize the extractor.

		Args:
			prefix: Namespace put in front of every property name
			date_format: strftime pattern for the commit time
			timezone: Zone the commit time is rendered in, see
				:func:`gitprops.utils.formatting.resolve_timezone`

		Raises:
			FormatError: If the date format or time zone is invalid
		"""
		validate_date_format(date_format)
		resolve_timezone(timezone)
		self.prefix = prefix
		self.date_format = date_format
		self.timezone = timezone

	def extract(self, handle: RepositoryHandle) -> PropertyMap:
		"""
		Extract the properties of the repository's HEAD commit.

		Args:
			handle: An open repository handle

		Returns:
			The property map, with every field present

		Raises:
			ConfigReadError: If the configuration cannot be read
			HeadResolutionError: If HEAD does not resolve to a commit
			ExtractionError: If any other repository read fails
		"""
		repo = handle.repo
		try:
			environ = handle.environ if handle.env_overrides else None
			build_name, build_email = resolve_build_identity(open_config(repo), environ)

			head = resolve_head(repo)
			record = CommitRecord.from_commit(head)
			branch = resolve_branch(repo, record.commit_id)
		except ExtractionError:
			raise
		except (Pygit2GitError, OSError) as e:
			msg = f"Failed to read metadata from repository '{handle.root}': {e}"
			logger.exception(msg)
			raise ExtractionError(msg) from e

		values = {
			BUILD_AUTHOR_NAME: build_name,
			BUILD_AUTHOR_EMAIL: build_email,
			BRANCH: branch,
			COMMIT_ID: record.commit_id,
			COMMIT_AUTHOR_NAME: record.author_name,
			COMMIT_AUTHOR_EMAIL: record.author_email,
			COMMIT_MESSAGE_FULL: record.message,
			COMMIT_MESSAGE_SHORT: record.summary,
			COMMIT_TIME: format_commit_time(
				record.commit_time, self.date_format, self.timezone, record.commit_time_offset
			),
		}
		return PropertyMap({property_key(self.prefix, field): values[field] for field in PROPERTY_FIELDS})


def extract(
	handle: RepositoryHandle,
	prefix: str = DEFAULT_PREFIX,
	date_format: str = DEFAULT_DATE_FORMAT,
	timezone: str | None = None,
) -> PropertyMap:
	"""Extract the properties of ``handle``'s HEAD commit, see :class:`MetadataExtractor`."""
	return MetadataExtractor(prefix, date_format, timezone).extract(handle)
