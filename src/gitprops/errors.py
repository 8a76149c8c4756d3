"""Exceptions raised while locating repositories and extracting properties."""

from __future__ import annotations

from pathlib import Path


class GitPropsError(Exception):
	"""Base exception for all gitprops errors."""


class RepositoryNotFoundError(GitPropsError):
	"""Raised when no git repository can be found from a base directory."""

	def __init__(self, base_dir: Path | str | None, reason: str | None = None) -> None:
		"""
		Initialize the error with the directory that was searched.

		Args:
			base_dir: The directory discovery started from, if any
			reason: Optional extra detail appended to the message
		"""
		self.base_dir = Path(base_dir) if base_dir is not None else None
		if self.base_dir is None:
			msg = "Could not locate a git repository: no base directory or project root was given"
		else:
			msg = (
				f"Could not locate a git repository from '{self.base_dir}'. "
				"Are you sure it is inside a valid git working tree?"
			)
		if reason:
			msg = f"{msg} ({reason})"
		super().__init__(msg)


class FormatError(GitPropsError):
	"""Raised when a date format pattern or time zone is invalid."""


class ExtractionError(GitPropsError):
	"""Raised when repository metadata cannot be read."""


class HeadResolutionError(ExtractionError):
	"""Raised when HEAD does not resolve to a commit."""


class ConfigReadError(ExtractionError):
	"""Raised when the repository configuration cannot be read."""
