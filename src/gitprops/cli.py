"""Command-line interface for gitprops."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Annotated, Any

import typer

from gitprops import __version__
from gitprops.api import collect_git_properties
from gitprops.config import ConfigError, ConfigLoader, ExtractionConfig, OutputFormat
from gitprops.errors import GitPropsError
from gitprops.utils.log_setup import display_error_summary, setup_logging
from gitprops.utils.output import write_properties

logger = logging.getLogger(__name__)

app = typer.Typer(
	help="gitprops - Expose git repository metadata as build properties.",
	context_settings={"help_option_names": ["-h", "--help"]},
)


def _version_callback(value: bool) -> None:
	"""Callback for --version option."""
	if value:
		typer.echo(f"gitprops version: {__version__}")
		raise typer.Exit


@app.command()
def extract_command(
	base_dir: Annotated[
		Path | None,
		typer.Option(
			"--base-dir",
			"-d",
			help="Directory to start looking for the repository from (defaults to the current directory).",
			file_okay=False,
		),
	] = None,
	prefix: Annotated[
		str | None,
		typer.Option("--prefix", "-p", help="Prefix for every property name, e.g. 'git' gives 'git.branch'."),
	] = None,
	date_format: Annotated[
		str | None,
		typer.Option("--date-format", help="strftime pattern for the commit time."),
	] = None,
	timezone: Annotated[
		str | None,
		typer.Option("--timezone", help="'local', 'commit' or an IANA zone name for the commit time."),
	] = None,
	no_env: Annotated[
		bool,
		typer.Option("--no-env", help="Ignore GIT_DIR, GIT_CEILING_DIRECTORIES and identity variables."),
	] = False,
	output_format: Annotated[
		str | None,
		typer.Option("--format", "-f", help="Output format: properties, json, yaml or env."),
	] = None,
	output_file: Annotated[
		Path | None,
		typer.Option("--output", "-o", help="Write the properties to this file instead of stdout.", dir_okay=False),
	] = None,
	config_file: Annotated[
		Path | None,
		typer.Option("--config", "-c", help="Path to config file."),
	] = None,
	verbose: Annotated[
		bool,
		typer.Option("--verbose", "-v", help="Enable verbose logging and log every property."),
	] = False,
	_version: Annotated[
		bool | None,
		typer.Option("--version", help="Show version and exit.", callback=_version_callback, is_eager=True),
	] = None,
) -> None:
	"""Extract branch, commit and identity information from the enclosing git repository."""
	setup_logging(is_verbose=verbose)

	try:
		app_config = ConfigLoader(config_file).get

		extraction_overrides: dict[str, Any] = {
			"base_dir": base_dir,
			"prefix": prefix,
			"date_format": date_format,
			"timezone": timezone,
		}
		extraction_updates = {key: value for key, value in extraction_overrides.items() if value is not None}
		if no_env:
			extraction_updates["env_overrides"] = False
		if verbose:
			extraction_updates["verbose"] = True
		extraction = ExtractionConfig.model_validate({**app_config.extraction.model_dump(), **extraction_updates})

		fmt: OutputFormat = output_format or app_config.output.format  # type: ignore[assignment]
		target = output_file or app_config.output.file

		if extraction.verbose and not verbose:
			setup_logging(is_verbose=True)

		properties = collect_git_properties(extraction, project_root=Path.cwd())
		text = write_properties(properties, fmt, target)
	except (GitPropsError, ConfigError, ValueError) as e:
		logger.debug("Extraction failed", exc_info=True)
		display_error_summary(str(e))
		raise typer.Exit(1) from e

	if target is None:
		typer.echo(text, nl=False)
	else:
		typer.secho(f"Wrote {len(properties)} properties to {target}", fg=typer.colors.GREEN, err=True)


def main() -> int:
	"""Run the CLI application."""
	return app()


if __name__ == "__main__":
	sys.exit(main())
