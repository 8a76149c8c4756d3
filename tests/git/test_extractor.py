"""Tests for metadata extraction."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
from pygit2 import Commit, Repository, init_repository, settings
from pygit2 import GitError as Pygit2GitError
from pygit2.enums import ConfigLevel

from gitprops.errors import ConfigReadError, ExtractionError, FormatError, HeadResolutionError
from gitprops.git.extractor import MetadataExtractor, extract, read_config_value, resolve_build_identity
from gitprops.git.locator import RepositoryHandle, locate
from tests.base import (
	AUTHOR_EMAIL,
	AUTHOR_NAME,
	BUILD_USER_EMAIL,
	BUILD_USER_NAME,
	COMMIT_MESSAGE,
	make_commit,
)

UTC_FORMAT = "%Y-%m-%d %H:%M:%S %Z"


def _open(repo: Repository, environ: dict[str, str] | None = None) -> RepositoryHandle:
	root = Path(repo.workdir).resolve()
	return locate(root, environ={"GIT_CEILING_DIRECTORIES": str(root.parent), **(environ or {})})


@pytest.fixture
def unconfigured_repo(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Repository:
	"""A repository with one commit and no user identity in any config file."""
	home = tmp_path / "home"
	home.mkdir()
	monkeypatch.setenv("HOME", str(home))
	monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
	levels = (ConfigLevel.SYSTEM, ConfigLevel.XDG, ConfigLevel.GLOBAL)
	saved = {level: settings.search_path[level] for level in levels}
	for level in levels:
		settings.search_path[level] = str(home)

	repo = init_repository(str(tmp_path / "bare-identity"), initial_head="main")
	make_commit(repo)
	yield repo
	repo.free()
	for level, path in saved.items():
		settings.search_path[level] = path


@pytest.mark.git
class TestExtract:
	"""Test cases for extracting properties from a repository."""

	def test_known_commit(self, git_repo: Repository) -> None:
		"""Every property matches the HEAD commit and the local config."""
		head_id = str(git_repo.head.target)

		with _open(git_repo) as handle:
			properties = extract(handle, "git", UTC_FORMAT, "commit")

		assert dict(properties) == {
			"git.build.user.name": BUILD_USER_NAME,
			"git.build.user.email": BUILD_USER_EMAIL,
			"git.branch": "main",
			"git.commit.id": head_id,
			"git.commit.user.name": AUTHOR_NAME,
			"git.commit.user.email": AUTHOR_EMAIL,
			"git.commit.message.full": COMMIT_MESSAGE,
			"git.commit.message.short": "Add readme",
			"git.commit.time": "2011-03-13 07:07:40 UTC",
		}

	def test_key_order(self, git_repo: Repository) -> None:
		"""Properties come out in a fixed order."""
		with _open(git_repo) as handle:
			properties = extract(handle, "git", UTC_FORMAT, "commit")

		assert list(properties) == [
			"git.build.user.name",
			"git.build.user.email",
			"git.branch",
			"git.commit.id",
			"git.commit.user.name",
			"git.commit.user.email",
			"git.commit.message.full",
			"git.commit.message.short",
			"git.commit.time",
		]

	def test_commit_id_is_full_lowercase_hash(self, git_repo: Repository) -> None:
		"""The commit id is the untruncated lowercase hex id of HEAD."""
		with _open(git_repo) as handle:
			commit_id = extract(handle, "git", UTC_FORMAT, "commit")["git.commit.id"]

		assert commit_id == str(git_repo.head.target)
		assert len(commit_id) == 40
		assert commit_id == commit_id.lower()

	def test_prefix_renames_keys_only(self, git_repo: Repository) -> None:
		"""A different prefix changes every key and no value."""
		with _open(git_repo) as handle:
			git_properties = extract(handle, "git", UTC_FORMAT, "commit")
			scm_properties = extract(handle, "scm", UTC_FORMAT, "commit")

		assert all(key.startswith("scm.") for key in scm_properties)
		assert list(scm_properties.values()) == list(git_properties.values())
		assert [key.removeprefix("scm.") for key in scm_properties] == [
			key.removeprefix("git.") for key in git_properties
		]

	def test_idempotent(self, git_repo: Repository) -> None:
		"""Extracting twice from an unchanged repository gives the same map."""
		with _open(git_repo) as handle:
			first = extract(handle, "git", UTC_FORMAT, "commit")
		with _open(git_repo) as handle:
			second = extract(handle, "git", UTC_FORMAT, "commit")

		assert first == second

	def test_follows_new_commits(self, git_repo: Repository) -> None:
		"""A new commit on the branch is reflected on the next extraction."""
		second_id = make_commit(git_repo, "Second change\n", filename="CHANGES.md", commit_time=1_300_000_120)

		with _open(git_repo) as handle:
			properties = extract(handle, "git", UTC_FORMAT, "commit")

		assert properties["git.commit.id"] == str(second_id)
		assert properties["git.commit.message.short"] == "Second change"
		assert properties["git.commit.time"] == "2011-03-13 07:08:40 UTC"

	def test_commit_time_uses_commit_offset(self, empty_repo: Repository) -> None:
		"""The 'commit' zone renders the time with the recorded offset."""
		make_commit(empty_repo, offset=120)

		with _open(empty_repo) as handle:
			properties = extract(handle, "git", "%H:%M:%S %z", "commit")

		assert properties["git.commit.time"] == "09:07:40 +0200"

	def test_detached_head_reports_commit_id(self, git_repo: Repository) -> None:
		"""With a detached HEAD the branch is the full commit id."""
		head_id = git_repo.head.target
		git_repo.set_head(head_id)

		with _open(git_repo) as handle:
			properties = extract(handle, "git", UTC_FORMAT, "commit")

		assert properties["git.branch"] == str(head_id)
		assert properties["git.branch"] == properties["git.commit.id"]

	def test_other_branch(self, git_repo: Repository) -> None:
		"""The short name of the checked out branch is reported."""
		git_repo.create_branch("feature/props", git_repo.head.peel(Commit))
		git_repo.set_head("refs/heads/feature/props")

		with _open(git_repo) as handle:
			properties = extract(handle, "git", UTC_FORMAT, "commit")

		assert properties["git.branch"] == "feature/props"

	def test_empty_repository(self, empty_repo: Repository) -> None:
		"""A repository without commits cannot be extracted from."""
		with _open(empty_repo) as handle, pytest.raises(HeadResolutionError, match="no commits"):
			extract(handle, "git", UTC_FORMAT, "commit")

	def test_closed_handle(self, git_repo: Repository) -> None:
		"""Extracting from a released handle fails."""
		with _open(git_repo) as handle:
			pass

		with pytest.raises(ExtractionError):
			extract(handle)

	def test_repository_errors_are_wrapped(self, git_repo: Repository) -> None:
		"""pygit2 errors surface as ExtractionError with the cause chained."""
		with (
			_open(git_repo) as handle,
			patch("gitprops.git.extractor.resolve_branch", side_effect=Pygit2GitError("corrupt ref")),
			pytest.raises(ExtractionError, match="corrupt ref") as excinfo,
		):
			extract(handle)

		assert isinstance(excinfo.value.__cause__, Pygit2GitError)

	def test_environment_identity_overrides(self, git_repo: Repository) -> None:
		"""GIT_AUTHOR_* override the configured build identity."""
		environ = {"GIT_AUTHOR_NAME": "Env Builder", "GIT_AUTHOR_EMAIL": "env@example.com"}

		with _open(git_repo, environ) as handle:
			properties = extract(handle, "git", UTC_FORMAT, "commit")

		assert properties["git.build.user.name"] == "Env Builder"
		assert properties["git.build.user.email"] == "env@example.com"
		assert properties["git.commit.user.name"] == AUTHOR_NAME

	def test_environment_ignored_without_overrides(self, git_repo: Repository) -> None:
		"""Identity variables have no effect when overrides are off."""
		root = Path(git_repo.workdir).resolve()
		environ = {"GIT_AUTHOR_NAME": "Env Builder"}

		with locate(root, env_overrides=False, environ=environ) as handle:
			properties = extract(handle, "git", UTC_FORMAT, "commit")

		assert properties["git.build.user.name"] == BUILD_USER_NAME

	def test_unset_identity_is_empty(self, unconfigured_repo: Repository) -> None:
		"""Without user.name or user.email anywhere the build identity is empty."""
		with _open(unconfigured_repo) as handle:
			properties = extract(handle, "git", UTC_FORMAT, "commit")

		assert properties["git.build.user.name"] == ""
		assert properties["git.build.user.email"] == ""
		assert properties["git.commit.user.name"] == AUTHOR_NAME
		assert len(properties) == 9


@pytest.mark.unit
class TestMetadataExtractor:
	"""Test cases for extractor construction."""

	def test_invalid_date_format_fails_early(self) -> None:
		"""The format is checked before any repository is read."""
		with pytest.raises(FormatError):
			MetadataExtractor("git", "%Y-%")

	def test_invalid_timezone_fails_early(self) -> None:
		"""Unknown zones are rejected up front."""
		with pytest.raises(FormatError):
			MetadataExtractor("git", UTC_FORMAT, "Nowhere/Special")


class _BrokenConfig:
	"""A config whose reads always fail."""

	def __contains__(self, key: str) -> bool:
		msg = "failed to parse config file"
		raise Pygit2GitError(msg)


@pytest.mark.unit
class TestConfigReads:
	"""Test cases for reading the build identity."""

	def test_missing_values_are_empty(self) -> None:
		"""Unset keys are stored as empty strings."""
		assert read_config_value({}, "user.email") == ""
		assert resolve_build_identity({"user.name": "Only Name"}) == ("Only Name", "")

	def test_unreadable_config(self) -> None:
		"""Configuration errors surface as ConfigReadError."""
		with pytest.raises(ConfigReadError, match="user.name") as excinfo:
			read_config_value(_BrokenConfig(), "user.name")

		assert isinstance(excinfo.value.__cause__, Pygit2GitError)

	def test_email_environment_fallback(self) -> None:
		"""EMAIL only applies when no email is configured."""
		environ = {"EMAIL": "fallback@example.com"}

		assert resolve_build_identity({}, environ) == ("", "fallback@example.com")
		assert resolve_build_identity({"user.email": "set@example.com"}, environ) == ("", "set@example.com")

	def test_author_environment_wins(self) -> None:
		"""GIT_AUTHOR_EMAIL beats both the config and EMAIL."""
		environ = {"GIT_AUTHOR_EMAIL": "author@example.com", "EMAIL": "fallback@example.com"}

		assert resolve_build_identity({"user.email": "set@example.com"}, environ) == ("", "author@example.com")
