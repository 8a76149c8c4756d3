"""Render property maps in formats build tools can consume."""

from __future__ import annotations

import json
import logging
import re
import shlex
from typing import TYPE_CHECKING

import yaml

if TYPE_CHECKING:
	from collections.abc import Callable, Mapping
	from pathlib import Path

logger = logging.getLogger(__name__)

_PROPERTIES_ESCAPES = {
	"\\": "\\\\",
	"\n": "\\n",
	"\r": "\\r",
	"\t": "\\t",
	"\f": "\\f",
	"=": "\\=",
	":": "\\:",
	"#": "\\#",
	"!": "\\!",
}

_ENV_KEY_INVALID = re.compile(r"[^A-Za-z0-9]")


def _escape_properties(text: str, *, is_key: bool) -> str:
	escaped = []
	for index, char in enumerate(text):
		if char == " " and (is_key or index == 0):
			escaped.append("\\ ")
		else:
			escaped.append(_PROPERTIES_ESCAPES.get(char, char))
	return "".join(escaped)


def to_properties(properties: Mapping[str, str]) -> str:
	"""Render properties as a Java ``.properties`` file."""
	lines = [
		f"{_escape_properties(key, is_key=True)}={_escape_properties(value, is_key=False)}"
		for key, value in properties.items()
	]
	return "\n".join(lines) + "\n" if lines else ""


def to_json(properties: Mapping[str, str]) -> str:
	"""Render properties as a JSON object."""
	return json.dumps(dict(properties), indent=2, ensure_ascii=False) + "\n"


def to_yaml(properties: Mapping[str, str]) -> str:
	"""Render properties as a flat YAML mapping."""
	return yaml.safe_dump(dict(properties), sort_keys=False, allow_unicode=True, default_flow_style=False)


def env_key(key: str) -> str:
	"""Turn a property name like ``git.commit.id`` into ``GIT_COMMIT_ID``."""
	return _ENV_KEY_INVALID.sub("_", key).upper()


def to_env(properties: Mapping[str, str]) -> str:
	"""Render properties as shell-style ``KEY=value`` assignments."""
	lines = [f"{env_key(key)}={shlex.quote(value)}" for key, value in properties.items()]
	return "\n".join(lines) + "\n" if lines else ""


RENDERERS: dict[str, Callable[[Mapping[str, str]], str]] = {
	"properties": to_properties,
	"json": to_json,
	"yaml": to_yaml,
	"env": to_env,
}


def render_properties(properties: Mapping[str, str], fmt: str = "properties") -> str:
	"""
	Render properties in one of the supported formats.

	Args:
		properties: The properties to render
		fmt: One of ``properties``, ``json``, ``yaml`` or ``env``

	Returns:
		The rendered text

	Raises:
		ValueError: If the format is not supported
	"""
	try:
		renderer = RENDERERS[fmt]
	except KeyError as e:
		msg = f"Unsupported output format '{fmt}', expected one of: {', '.join(RENDERERS)}"
		raise ValueError(msg) from e
	return renderer(properties)


def write_properties(properties: Mapping[str, str], fmt: str = "properties", path: Path | None = None) -> str:
	"""
	Render properties and optionally write them to a file.

	Args:
		properties: The properties to render
		fmt: Output format, see :func:`render_properties`
		path: File to write; parent directories are created

	Returns:
		The rendered text
	"""
	text = render_properties(properties, fmt)
	if path is not None:
		path.parent.mkdir(parents=True, exist_ok=True)
		path.write_text(text, encoding="utf-8")
		logger.info("Wrote %d properties to %s", len(properties), path)
	return text
