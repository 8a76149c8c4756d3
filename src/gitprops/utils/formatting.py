"""Formatting helpers for property keys, commit messages and commit times."""

from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from gitprops.errors import FormatError

# Equivalent of "dd.MM.yyyy '@' HH:mm:ss z"
DEFAULT_DATE_FORMAT = "%d.%m.%Y @ %H:%M:%S %Z"

LOCAL_TIMEZONE = "local"
COMMIT_TIMEZONE = "commit"

# Directives Python documents for datetime.strftime
STRFTIME_DIRECTIVES = frozenset("aAwdbBmyYHIpMSfzZjUWcxXGuV%")

# %:z (UTC offset with a colon) is only rendered from Python 3.12 on
COLON_OFFSET_SUPPORTED = sys.version_info >= (3, 12)


def property_key(prefix: str, field: str) -> str:
	"""Build a namespaced property key such as ``git.commit.id``."""
	return f"{prefix}.{field}"


def validate_date_format(pattern: str) -> None:
	"""
	Check that a strftime pattern only uses known directives.

	Args:
		pattern: The date format pattern to validate

	Raises:
		FormatError: If the pattern is empty, ends in a lone ``%`` or uses an
			unknown directive.
	"""
	if not pattern:
		msg = "Date format pattern must not be empty"
		raise FormatError(msg)

	index = 0
	while index < len(pattern):
		if pattern[index] != "%":
			index += 1
			continue
		directive = pattern[index + 1 : index + 2]
		if directive == ":" and pattern[index + 2 : index + 3] == "z":
			if not COLON_OFFSET_SUPPORTED:
				msg = f"Date format pattern '{pattern}' uses '%:z', which needs Python 3.12 or newer"
				raise FormatError(msg)
			index += 3
			continue
		if not directive:
			msg = f"Date format pattern '{pattern}' ends with an incomplete directive"
			raise FormatError(msg)
		if directive not in STRFTIME_DIRECTIVES:
			msg = f"Date format pattern '{pattern}' uses unknown directive '%{directive}'"
			raise FormatError(msg)
		index += 2


def resolve_timezone(name: str | None, offset_minutes: int = 0) -> tzinfo | None:
	"""
	Resolve the time zone commit times are rendered in.

	Args:
		name: ``None`` or ``"local"`` for the local zone, ``"commit"`` for the
			offset recorded in the commit, otherwise an IANA zone name
		offset_minutes: The commit's recorded UTC offset in minutes

	Returns:
		The tzinfo to convert to, or None for the local zone

	Raises:
		FormatError: If the zone name is unknown
	"""
	if name is None or name == LOCAL_TIMEZONE:
		return None
	if name == COMMIT_TIMEZONE:
		return timezone(timedelta(minutes=offset_minutes))
	try:
		return ZoneInfo(name)
	except (ZoneInfoNotFoundError, ValueError) as e:
		msg = f"Unknown time zone '{name}'"
		raise FormatError(msg) from e


def format_commit_time(
	seconds: int,
	pattern: str = DEFAULT_DATE_FORMAT,
	timezone_name: str | None = None,
	offset_minutes: int = 0,
) -> str:
	"""
	Format a commit timestamp.

	Git records commit times in whole seconds since the epoch, which is what
	``datetime.fromtimestamp`` expects, so no unit scaling is applied.

	Args:
		seconds: Commit time in seconds since the epoch (UTC)
		pattern: strftime pattern
		timezone_name: See :func:`resolve_timezone`
		offset_minutes: The commit's recorded UTC offset in minutes

	Returns:
		The formatted time

	Raises:
		FormatError: If the pattern or time zone is invalid
	"""
	validate_date_format(pattern)
	target = resolve_timezone(timezone_name, offset_minutes)
	moment = datetime.fromtimestamp(seconds, tz=timezone.utc)
	moment = moment.astimezone() if target is None else moment.astimezone(target)
	return moment.strftime(pattern)


def summarize_message(message: str) -> str:
	"""
	Get the summary line of a commit message.

	The summary is the first paragraph of the message with its line breaks
	folded into single spaces. Leading blank lines are skipped.

	Args:
		message: The full commit message

	Returns:
		The summary, or an empty string for an empty message
	"""
	paragraph: list[str] = []
	for line in message.split("\n"):
		stripped = line.strip()
		if not stripped:
			if paragraph:
				break
			continue
		paragraph.append(stripped)
	return " ".join(paragraph)
