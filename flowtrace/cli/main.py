"""Command-line tools for inspecting captured content and sessions."""

import json
import sys
from pathlib import Path

import click
import structlog
from pydantic import ValidationError

from flowtrace import __version__
from flowtrace.differ import BlockDiffEngine, DiffComputationFailure
from flowtrace.layout import build_timeline, compress_session
from flowtrace.observability import configure_from_settings
from flowtrace.parser import BlockParseError, block_prefix, parse_blocks
from flowtrace.recorder import Session
from flowtrace.settings import get_settings


logger = structlog.get_logger()


def _setup_logging(json_logs: bool) -> None:
    configure_from_settings(get_settings().model_copy(update={"log_json": json_logs}))


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """Session recording diff and compression tools."""


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "json_output", is_flag=True, help="Output as JSON.")
@click.option("--json-logs", is_flag=True, help="Emit logs as JSON.")
def blocks(path: Path, json_output: bool, json_logs: bool) -> None:
    """Split a text file into structural blocks."""
    _setup_logging(json_logs)

    try:
        parsed = parse_blocks(path.read_bytes())
    except BlockParseError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if json_output:
        click.echo(json.dumps([block.to_json_dict() for block in parsed], indent=2))
        return

    for block in parsed:
        prefix = block_prefix(block)
        click.echo(f"{block.start:>6} {block.type.value:<10} {prefix}{block.content}")


@cli.command()
@click.argument("old", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("new", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--threshold",
    type=click.FloatRange(0.0, 1.0),
    default=None,
    help="Similarity a same-type pair must exceed to count as modified.",
)
@click.option("--strict", is_flag=True, help="Fail instead of falling back.")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON.")
@click.option("--json-logs", is_flag=True, help="Emit logs as JSON.")
def diff(  # noqa: PLR0913
    old: Path,
    new: Path,
    threshold: float | None,
    strict: bool,
    json_output: bool,
    json_logs: bool,
) -> None:
    """Diff two text files at block level."""
    _setup_logging(json_logs)

    settings = get_settings()
    if threshold is not None:
        settings = settings.model_copy(update={"similarity_threshold": threshold})
    engine = BlockDiffEngine.from_settings(settings)

    old_text, new_text = old.read_bytes(), new.read_bytes()
    try:
        if strict:
            result = engine.compute_diff_strict(old_text, new_text)
        else:
            result = engine.compute_diff(old_text, new_text)
    except DiffComputationFailure as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if json_output:
        click.echo(json.dumps(result.to_json_dict(), indent=2))
    elif result.has_changes:
        for token in result.tokens:
            click.echo(token)
    else:
        click.echo("No changes.")


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--output",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the compressed session here instead of stdout.",
)
@click.option("--timeline", is_flag=True, help="Print the session timeline instead.")
@click.option("--json-logs", is_flag=True, help="Emit logs as JSON.")
def compress(
    path: Path, output_path: Path | None, timeline: bool, json_logs: bool
) -> None:
    """Compress an exported session JSON file."""
    _setup_logging(json_logs)
    log = logger.bind(component="cli")

    try:
        session = Session.from_json_dict(json.loads(path.read_text(encoding="utf-8")))
    except (UnicodeDecodeError, json.JSONDecodeError, ValidationError, ValueError) as e:
        click.echo(f"Error: invalid session file: {e}", err=True)
        sys.exit(1)

    compressed = compress_session(session)

    if timeline:
        for entry in build_timeline(compressed.states, compressed.actions):
            if entry.state is not None:
                marker = "*" if entry.is_first else " "
                click.echo(
                    f"{marker} state  #{entry.sequence_number} "
                    f"{entry.state.state.location}"
                )
            elif entry.action is not None:
                click.echo(
                    f"  action #{entry.sequence_number} {entry.action.kind.value}"
                )
        return

    payload = json.dumps(compressed.to_json_dict(), indent=2)
    if output_path is None:
        click.echo(payload)
        return

    output_path.write_text(payload, encoding="utf-8")
    log.info("compressed_session_written", path=str(output_path))
    click.echo(f"Wrote {output_path}")


if __name__ == "__main__":
    cli()
