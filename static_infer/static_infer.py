import json
import logging
from dataclasses import dataclass
from pathlib import Path

import click

from .cli_utils import read_text, reconstruct_command_line
from .config import InferenceConfig, MockFormat, MockWriteOptions
from .errors import MockWriteError
from .extract import ConfigEntry, build_preview, detect_entries, extract_schemas, merge_schema_maps, plan_mock_writes_for_schemas
from .syntax import SourceParser, load_parser
from .utils import to_json
from .writer import MockFileWriter

logger = logging.getLogger(__name__)


@dataclass
class CliState:
    config: InferenceConfig
    parser: SourceParser | None


def _echo_warnings(warnings: list[str]) -> None:
    for warning in warnings:
        click.echo(f"warning: {warning}", err=True)


def _read_or_fail(path: str) -> str:
    content = read_text(path)
    if content is None:
        raise click.FileError(path, hint="cannot be read as UTF-8 text")
    return content


@click.group()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True), help="JSON file with inference options")
@click.option("--no-parser", is_flag=True, default=False, help="Do not load tree-sitter (degraded text-only paths)")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug information to stderr")
@click.pass_context
def cli(ctx, config, no_parser, verbose):
    """Infer JSON values and schemas from TypeScript/JavaScript source without running it."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    if config is not None:
        with open(config) as f:
            inference_config = InferenceConfig.from_dict(json.load(f))
    else:
        inference_config = InferenceConfig()

    parser = None if no_parser else load_parser()
    if parser is None:
        logger.info("running without a syntax tree parser")
    ctx.obj = CliState(config=inference_config, parser=parser)


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, resolve_path=True))
@click.pass_obj
def preview(state, path):
    """Show the JSON a mock file responds with."""
    result = build_preview(path, _read_or_fail(path), state.parser, state.config)
    click.echo(result.text)
    click.echo(f"meta: {result.meta}", err=True)


@cli.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, resolve_path=True))
@click.pass_obj
def schemas(state, paths):
    """Print the JSON Schemas declared in one or more source files."""
    merged = merge_schema_maps(_labelled_schemas(state, paths))
    click.echo(to_json(merged.schemas))
    _echo_warnings(merged.warnings)


def _labelled_schemas(state, paths):
    for path in paths:
        result = extract_schemas(_read_or_fail(path), state.parser, state.config, file_name=path)
        label = Path(path).name
        result.warnings = [f"{label}: {warning}" for warning in result.warnings]
        yield result


@cli.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(dir_okay=False))
@click.pass_obj
def entries(state, paths):
    """Print the route entries configured in build-tool config files."""
    result = detect_entries(paths, read_text, state.parser, state.config)
    click.echo(to_json([entry.to_dict() for entry in result.entries]))
    _echo_warnings(result.warnings)


@cli.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, resolve_path=True))
@click.option("--dir", "-d", "entry_dir", default="mock", help="Entry directory receiving the mocks")
@click.option("--prefix", default=None, help="Route prefix of the entry")
@click.option("--root", "-r", default=".", type=click.Path(file_okay=False), help="Package root the entry dir is relative to")
@click.option("--format", "-f", "mock_format", default="ts", type=click.Choice([f.value for f in MockFormat]))
@click.option("--method", "-m", default="get", help="HTTP method of the schema routes")
@click.option("--base-path", default="/schema", help="Route path the schema mocks are served under")
@click.option("--template", "-t", default=None, type=click.Path(exists=True, dir_okay=False), help="jinja2 template for the mock files")
@click.option("--generation-comment", is_flag=True, default=False, help="Start TypeScript mocks with a generation comment")
@click.option("--write", is_flag=True, default=False, help="Write the files instead of printing the plan")
@click.option("--force", is_flag=True, default=False, help="Overwrite mock files that already exist")
@click.pass_context
def mocks(ctx, paths, entry_dir, prefix, root, mock_format, method, base_path, template, generation_comment, write, force):
    """Plan (and optionally write) one mock file per schema found in PATHS."""
    state = ctx.obj
    merged = merge_schema_maps(_labelled_schemas(state, paths))

    options = MockWriteOptions(
        format=MockFormat(mock_format),
        method=method,
        base_path=base_path,
        generation_comment=generation_comment,
        generation_command=reconstruct_command_line(ctx.command),
    )
    if template is not None:
        if options.format == MockFormat.TS:
            options.ts_template = _read_or_fail(template)
        else:
            options.json_template = _read_or_fail(template)

    plan = plan_mock_writes_for_schemas(merged.schemas, ConfigEntry(dir=entry_dir, prefix=prefix), root, options)
    warnings = merged.warnings + plan.warnings

    if not write:
        click.echo(to_json([{"path": f.path, "format": f.format.value, "content": f.content} for f in plan.files]))
        _echo_warnings(warnings)
        return

    writer = MockFileWriter(state.parser)
    written = 0
    for planned in plan.files:
        try:
            if force:
                writer.write(planned)
            elif not writer.write_if_not_exists(planned):
                warnings.append(f"Mock file already exists, skipped: {planned.path}")
                continue
        except (MockWriteError, OSError) as e:
            warnings.append(str(e))
            continue
        written += 1
    click.echo(to_json({"written": written, "planned": len(plan.files)}))
    _echo_warnings(warnings)


if __name__ == "__main__":
    cli()
