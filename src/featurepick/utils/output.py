"""Output format utilities for featurepick CLI commands."""

from enum import Enum
from typing import Callable
import functools
import click


class OutputFormat(str, Enum):
    """Supported output formats for CLI commands."""

    TEXT = "text"
    MARKDOWN = "markdown"
    JSON = "json"


def format_option(default: OutputFormat = OutputFormat.TEXT) -> Callable:
    """Create a Click option decorator for output format selection.

    Provides:
    - --format with choices: text, markdown, json
    - --md / --markdown alias for markdown format
    - --json alias for json format
    - --pretty to indent JSON output

    The aliases win over --format. The decorated function receives only
    `format` and `pretty`.

    Example:
        @click.command()
        @format_option()
        def show(format: str, pretty: bool):
            ...
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, markdown_flag: bool = False, json_flag: bool = False, **kwargs):
            if json_flag:
                kwargs["format"] = OutputFormat.JSON.value
            elif markdown_flag:
                kwargs["format"] = OutputFormat.MARKDOWN.value
            return func(*args, **kwargs)

        wrapper = click.option(
            "--format",
            "format",
            type=click.Choice([f.value for f in OutputFormat]),
            default=default.value,
            help=f"Output format (default: {default.value}).",
        )(wrapper)

        wrapper = click.option(
            "--pretty",
            is_flag=True,
            default=False,
            help="Indent JSON output.",
        )(wrapper)

        wrapper = click.option(
            "--md",
            "--markdown",
            "markdown_flag",
            is_flag=True,
            default=False,
            help="Output in markdown format (alias for --format markdown).",
        )(wrapper)

        wrapper = click.option(
            "--json",
            "json_flag",
            is_flag=True,
            default=False,
            help="Output in JSON format (alias for --format json).",
        )(wrapper)

        return wrapper

    return decorator
