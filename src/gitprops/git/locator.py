"""Locate and open the git repository enclosing a directory."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

from pygit2 import GitError as Pygit2GitError
from pygit2 import Repository, discover_repository

from gitprops.errors import ExtractionError, RepositoryNotFoundError

if TYPE_CHECKING:
	from collections.abc import Mapping
	from types import TracebackType

logger = logging.getLogger(__name__)

# Environment variables that change where the repository is looked up
GIT_DIR_ENV = "GIT_DIR"
GIT_CEILING_DIRECTORIES_ENV = "GIT_CEILING_DIRECTORIES"


class RepositoryHandle:
	"""
	A read-only handle on an opened repository.

	The handle owns the underlying pygit2 repository and releases it when
	closed. Use it as a context manager so it is released on every exit path.
	"""

	def __init__(
		self,
		repo: Repository,
		root: Path,
		*,
		env_overrides: bool = False,
		environ: Mapping[str, str] | None = None,
	) -> None:
		"""
		Initialize the handle.

		Args:
			repo: The opened repository
			root: The work tree root, or the git directory for bare repositories
			env_overrides: Whether identity environment variables apply
			environ: Environment captured when the repository was located
		"""
		self._repo: Repository | None = repo
		self.root = root
		self.env_overrides = env_overrides
		self.environ: dict[str, str] = dict(environ or {})

	@property
	def repo(self) -> Repository:
		"""The underlying repository."""
		if self._repo is None:
			msg = f"Repository handle for '{self.root}' is already closed"
			raise ExtractionError(msg)
		return self._repo

	@property
	def closed(self) -> bool:
		"""Whether the handle has been released."""
		return self._repo is None

	def close(self) -> None:
		"""Release the repository. Safe to call more than once."""
		if self._repo is None:
			return
		repo, self._repo = self._repo, None
		repo.free()
		logger.debug("Released repository at %s", self.root)

	def __enter__(self) -> RepositoryHandle:
		"""Enter the handle's scope."""
		return self

	def __exit__(
		self,
		exc_type: type[BaseException] | None,
		exc_val: BaseException | None,
		exc_tb: TracebackType | None,
	) -> None:
		"""Release the repository when leaving the scope."""
		self.close()

	def __repr__(self) -> str:
		"""Represent the handle for debugging."""
		state = "closed" if self.closed else "open"
		return f"<RepositoryHandle {self.root} ({state})>"


def _discover_git_dir(start: Path, environ: Mapping[str, str], env_overrides: bool) -> str | None:
	"""Find the git directory for ``start``, honouring git environment variables."""
	if env_overrides and environ.get(GIT_DIR_ENV):
		git_dir = Path(environ[GIT_DIR_ENV])
		if not git_dir.is_absolute():
			git_dir = Path.cwd() / git_dir
		logger.debug("Using %s=%s", GIT_DIR_ENV, git_dir)
		return str(git_dir)

	ceiling_dirs = environ.get(GIT_CEILING_DIRECTORIES_ENV) if env_overrides else None
	if ceiling_dirs:
		logger.debug("Stopping discovery at %s=%s", GIT_CEILING_DIRECTORIES_ENV, ceiling_dirs)
		return discover_repository(str(start), False, ceiling_dirs)
	return discover_repository(str(start))


def locate(
	base_dir: Path | str | None = None,
	env_overrides: bool = True,
	*,
	project_root: Path | str | None = None,
	environ: Mapping[str, str] | None = None,
) -> RepositoryHandle:
	"""
	Find the repository enclosing a directory and open it.

	Discovery starts at ``base_dir`` and walks up through its parents until a
	git metadata directory is found.

	Args:
		base_dir: Directory to start from
		env_overrides: Whether git environment variables (``GIT_DIR``,
			``GIT_CEILING_DIRECTORIES`` and the identity variables) apply
		project_root: Fallback used when ``base_dir`` is not set
		environ: Environment to read, defaults to ``os.environ``

	Returns:
		An open repository handle

	Raises:
		RepositoryNotFoundError: If no repository can be found or opened
	"""
	start = base_dir if base_dir is not None else project_root
	if start is None:
		logger.error("No base directory or project root to locate a repository from")
		raise RepositoryNotFoundError(None)

	start_path = Path(start).expanduser().resolve()
	if not start_path.is_dir():
		logger.error("Base directory %s does not exist or is not a directory", start_path)
		raise RepositoryNotFoundError(start_path, "not a directory")

	env = dict(os.environ if environ is None else environ)

	git_dir = _discover_git_dir(start_path, env, env_overrides)
	if git_dir is None:
		logger.error("No git repository found from %s", start_path)
		raise RepositoryNotFoundError(start_path)

	try:
		repo = Repository(git_dir)
	except (Pygit2GitError, OSError) as e:
		logger.exception("Failed to open repository at %s", git_dir)
		raise RepositoryNotFoundError(start_path, str(e)) from e

	root = Path(repo.workdir) if repo.workdir else Path(repo.path)
	logger.debug("Opened repository at %s (from %s)", root, start_path)
	return RepositoryHandle(repo, root.resolve(), env_overrides=env_overrides, environ=env)
