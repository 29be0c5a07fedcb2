import click

from ..app import AppContext
from ..errors import FeaturepickError
from ..models import parse_branch_queries
from ..report import sequence_to_str
from ..utils.output import format_option
from ..utils.util import print_or_page


@click.command()
@click.pass_obj
@click.argument("branches", nargs=-1, required=True)
@click.option(
    "--save/--no-save",
    "save",
    default=True,
    help="Write the commit list file (default: save).",
)
@format_option()
def select(app: AppContext, branches, save: bool, format: str, pretty: bool):
    """Find the commits of the given feature branches and list them oldest first.

    BRANCHES are matched against commit messages. Each argument may itself be
    a comma separated list.
    """
    queries = parse_branch_queries(",".join(branches))
    if not queries:
        click.echo("Error: No feature branches given.", err=True)
        raise SystemExit(1)

    try:
        sequence = app.select(queries, save=save)
    except FeaturepickError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    print_or_page(sequence_to_str(sequence, format, pretty), format=format)


@click.command()
@click.pass_obj
@format_option()
def show(app: AppContext, format: str, pretty: bool):
    """Show the stored commit list."""
    try:
        sequence = app.commit_list().load()
    except FeaturepickError as e:
        click.echo(f"Error: {e}", err=True)
        click.echo("Hint: Run 'featurepick select' first.", err=True)
        raise SystemExit(1)

    print_or_page(sequence_to_str(sequence, format, pretty), format=format)
