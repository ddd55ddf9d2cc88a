"""
CLI utilities for command line reconstruction and file reading.
"""

from __future__ import annotations

from pathlib import Path

import click

PROGRAM_NAME = "static_infer"


def reconstruct_command_line(click_command: click.Command) -> str:
    """
    Reconstruct the current subcommand's command line for generation comments.

    Path values are shortened to their file names, options left at their
    default are omitted.

    Args:
        click_command: Click command object for introspection

    Returns:
        Reconstructed command line string
    """
    try:
        ctx = click.get_current_context()
    except RuntimeError:
        return PROGRAM_NAME

    cmd_parts = [PROGRAM_NAME]
    if ctx.info_name and ctx.parent is not None:
        cmd_parts.append(ctx.info_name)

    arguments = []
    options = []
    for param in click_command.params:
        value = ctx.params.get(param.name)
        if value is None or value is False or value == ():
            continue
        if isinstance(param, click.Option) and value == param.default:
            continue

        values = value if isinstance(value, (list, tuple)) else [value]
        formatted = [_format_value(item) for item in values]

        if isinstance(param, click.Argument):
            arguments.extend(formatted)
        elif isinstance(param, click.Option):
            flag = param.opts[0] if param.opts else f"--{param.name}"
            if param.is_flag:
                options.append(flag)
            else:
                options.extend([flag, *formatted])

    cmd_parts.extend(arguments)
    cmd_parts.extend(options)
    return " ".join(cmd_parts)


def _format_value(value: object) -> str:
    # File paths are shown by name only
    if isinstance(value, (str, Path)):
        path_obj = Path(str(value))
        return path_obj.name if path_obj.exists() else str(value)
    return str(value)


def read_text(path: str) -> str | None:
    """Read a UTF-8 text file, returning None when it cannot be read."""
    try:
        with open(path, encoding="utf-8") as f:
            return f.read()
    except (OSError, UnicodeDecodeError):
        return None
