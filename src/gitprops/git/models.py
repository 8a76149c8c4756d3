"""Data models for commit data and the extracted property map."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, MutableMapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from gitprops.utils.formatting import summarize_message

if TYPE_CHECKING:
	from pygit2 import Commit

BRANCH = "branch"
COMMIT_ID = "commit.id"
BUILD_AUTHOR_NAME = "build.user.name"
BUILD_AUTHOR_EMAIL = "build.user.email"
COMMIT_AUTHOR_NAME = "commit.user.name"
COMMIT_AUTHOR_EMAIL = "commit.user.email"
COMMIT_MESSAGE_FULL = "commit.message.full"
COMMIT_MESSAGE_SHORT = "commit.message.short"
COMMIT_TIME = "commit.time"

# Order in which properties are emitted
PROPERTY_FIELDS = (
	BUILD_AUTHOR_NAME,
	BUILD_AUTHOR_EMAIL,
	BRANCH,
	COMMIT_ID,
	COMMIT_AUTHOR_NAME,
	COMMIT_AUTHOR_EMAIL,
	COMMIT_MESSAGE_FULL,
	COMMIT_MESSAGE_SHORT,
	COMMIT_TIME,
)


@dataclass(frozen=True)
class CommitRecord:
	"""The data read from a single commit."""

	commit_id: str
	author_name: str
	author_email: str
	message: str
	summary: str
	commit_time: int
	commit_time_offset: int = 0

	@classmethod
	def from_commit(cls, commit: Commit) -> CommitRecord:
		"""Build a record from a pygit2 commit."""
		message = commit.message or ""
		return cls(
			commit_id=str(commit.id),
			author_name=commit.author.name or "",
			author_email=commit.author.email or "",
			message=message,
			summary=summarize_message(message),
			commit_time=commit.commit_time,
			commit_time_offset=commit.commit_time_offset,
		)


class PropertyMap(Mapping[str, str]):
	"""
	Immutable, ordered mapping of property names to string values.

	Keys keep their insertion order, which is the order properties are
	logged and written in.
	"""

	__slots__ = ("_data",)

	def __init__(self, items: Mapping[str, str] | None = None) -> None:
		"""
		Initialize the map.

		Args:
			items: Properties to copy in

		Raises:
			TypeError: If a key or value is not a string
		"""
		data: dict[str, str] = {}
		for key, value in (items or {}).items():
			if not isinstance(key, str) or not isinstance(value, str):
				msg = f"Property {key!r} must map a string to a string, got {type(value).__name__}"
				raise TypeError(msg)
			data[key] = value
		self._data = data

	def __getitem__(self, key: str) -> str:
		"""Get a property value."""
		return self._data[key]

	def __iter__(self) -> Iterator[str]:
		"""Iterate over property names in order."""
		return iter(self._data)

	def __len__(self) -> int:
		"""Get the number of properties."""
		return len(self._data)

	def __eq__(self, other: object) -> bool:
		"""Compare with another mapping, including key order."""
		if isinstance(other, PropertyMap):
			return list(self._data.items()) == list(other._data.items())
		if isinstance(other, Mapping):
			return self._data == dict(other)
		return NotImplemented

	def __hash__(self) -> int:
		"""Hash the ordered items."""
		return hash(tuple(self._data.items()))

	def __repr__(self) -> str:
		"""Represent the map for debugging."""
		return f"PropertyMap({self._data!r})"

	def merge_into(self, store: MutableMapping[str, str]) -> MutableMapping[str, str]:
		"""
		Copy every property into a caller-owned store.

		Existing entries with the same names are overwritten.

		Args:
			store: The mapping to update, e.g. a build's property store

		Returns:
			The updated store
		"""
		store.update(self._data)
		return store
