"""Global test fixtures and configuration."""

from __future__ import annotations

from pathlib import Path

import pytest
from pygit2 import Repository, init_repository

from tests.base import BUILD_USER_EMAIL, BUILD_USER_NAME, make_commit


@pytest.fixture
def empty_repo(tmp_path: Path) -> Repository:
	"""A freshly initialized repository on ``main`` without commits."""
	repo = init_repository(str(tmp_path / "repo"), initial_head="main")
	repo.config["user.name"] = BUILD_USER_NAME
	repo.config["user.email"] = BUILD_USER_EMAIL
	yield repo
	repo.free()


@pytest.fixture
def git_repo(empty_repo: Repository) -> Repository:
	"""A repository with a single commit on ``main``."""
	make_commit(empty_repo)
	return empty_repo


@pytest.fixture
def repo_root(git_repo: Repository) -> Path:
	"""Work tree root of ``git_repo``."""
	return Path(git_repo.workdir).resolve()


@pytest.fixture
def outside_dir(tmp_path: Path) -> Path:
	"""A directory that is not inside any repository."""
	path = tmp_path / "plain"
	path.mkdir()
	return path.resolve()


@pytest.fixture
def isolated_env(tmp_path: Path) -> dict[str, str]:
	"""An environment that keeps discovery from leaving ``tmp_path``."""
	return {"GIT_CEILING_DIRECTORIES": str(tmp_path.resolve())}
