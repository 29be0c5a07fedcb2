import io
import shutil
import sys
from datetime import datetime

import click
from jinja2 import Environment, StrictUndefined
from rich.console import Console
from rich.markdown import Markdown
from rich.theme import Theme


REPORT_THEME = Theme(
    {
        "markdown.h1": "bold",
        "markdown.h2": "bold underline",
        "markdown.strong": "bold",
        "markdown.item.bullet": "dim",
        "markdown.code": "cyan",
        "markdown.table.border": "dim",
        "markdown.table.header": "bold",
    }
)


def format_timestamp(timestamp: datetime) -> str:
    """Format a commit timestamp as `YYYY-MM-DD HH:MM:SS +ZZZZ`."""
    return timestamp.strftime("%Y-%m-%d %H:%M:%S %z").strip()


def format_number(n: int) -> str:
    return f"{n:,}"


def markdown_cell(text: str) -> str:
    """Make a commit summary safe to put in a markdown table cell."""
    return " ".join(str(text).split()).replace("|", "\\|")


def _create_report_env() -> Environment:
    env = Environment(
        undefined=StrictUndefined,
        keep_trailing_newline=False,
        autoescape=False,
    )
    env.filters["timestamp"] = format_timestamp
    env.filters["number"] = format_number
    env.filters["cell"] = markdown_cell
    return env


_report_env = _create_report_env()


def render_from_template(template_str: str, **context) -> str:
    """Render a report template with the timestamp/number/cell filters."""
    return _report_env.from_string(template_str).render(**context)


def render_markdown(text: str, width: int = None) -> str:
    """Render markdown to ANSI text for a terminal."""
    buf = io.StringIO()
    console = Console(
        file=buf,
        force_terminal=True,
        width=width or shutil.get_terminal_size((100, 20)).columns,
        theme=REPORT_THEME,
    )
    console.print(Markdown(text, justify="left", inline_code_lexer="text"))
    return buf.getvalue()


def print_or_page(text: str, format: str = "text"):
    """Print a report, rendering markdown and paging when stdout is a terminal.

    Piped or captured output is always printed as is, so `--format` output
    stays machine-readable.
    """
    if not sys.stdout.isatty():
        click.echo(text, nl=False)
        return

    if format == "markdown":
        text = render_markdown(text)

    term_height = shutil.get_terminal_size((100, 20)).lines
    if text.count("\n") + 4 <= term_height:
        click.echo(text, nl=False)
    else:
        click.echo_via_pager(text)
