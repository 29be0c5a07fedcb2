import click
from typing import Optional

from ..app import AppContext
from ..errors import FeaturepickError
from ..models import parse_branch_queries
from ..report import sequence_to_text
from ..utils.output import OutputFormat, format_option
from .pick import run_pick_session


@click.command()
@click.pass_obj
@click.argument("branches", required=False)
@format_option(default=OutputFormat.MARKDOWN)
def run(app: AppContext, branches: Optional[str], format: str, pretty: bool):
    """Select the commits of some feature branches and cherry-pick them.

    BRANCHES is a comma separated list; you are asked for it when omitted.
    """
    if branches is None:
        branches = click.prompt(
            "Enter feature branches (comma separated)",
            default="",
            show_default=False,
            err=True,
        )

    queries = parse_branch_queries(branches)
    if not queries:
        click.echo("No feature branches given, nothing to do.", err=True)
        return

    try:
        sequence = app.select(queries)
    except FeaturepickError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    click.echo(sequence_to_text(sequence), nl=False, err=True)
    run_pick_session(app, sequence, format, pretty)
