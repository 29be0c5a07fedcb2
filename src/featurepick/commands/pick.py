import click
import logging
from typing import Optional

from ..app import AppContext
from ..errors import Cancelled, FeaturepickError
from ..models import CommitSequence
from ..report import session_to_str
from ..utils.output import OutputFormat, format_option
from ..utils.util import print_or_page

log = logging.getLogger(__name__)


def run_pick_session(app: AppContext, sequence: CommitSequence, format: str, pretty: bool = False):
    """Run the pick driver and print the session report.

    Operator cancellation is reported and is not an error: the process exits
    with status 0. Fatal errors exit with status 1.
    """
    if not sequence:
        click.echo("No commits to cherry-pick.", err=True)
        return

    ops = app.repo_ops()
    if ops.is_cherry_pick_in_progress():
        click.echo(
            "Error: A cherry-pick is already in progress. "
            "Finish it or run 'git cherry-pick --abort' first.",
            err=True,
        )
        raise SystemExit(1)

    click.echo(f"Cherry-picking {len(sequence)} commits onto '{ops.current_branch()}'", err=True)

    try:
        session = app.pick(sequence)
    except Cancelled as e:
        click.echo(str(e), err=True)
        session = e.session
    except FeaturepickError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    click.echo(err=True)
    print_or_page(session_to_str(session, format, pretty), format=format)


@click.command()
@click.pass_obj
@click.option(
    "--skip",
    "skip",
    type=click.IntRange(min=0),
    default=0,
    help="Skip the first N commits of the list.",
)
@click.option(
    "--from",
    "from_sha",
    default=None,
    help="Start at the commit whose hash starts with this prefix.",
)
@format_option(default=OutputFormat.MARKDOWN)
def pick(app: AppContext, skip: int, from_sha: Optional[str], format: str, pretty: bool):
    """Cherry-pick the commits of the stored commit list, in file order.

    Every commit is applied with --no-commit; committing is left to you.
    When a pick conflicts you are asked to resolve it, or to type 'abort'.
    """
    if skip and from_sha:
        click.echo("Error: --skip and --from are mutually exclusive.", err=True)
        raise SystemExit(1)

    try:
        sequence = app.commit_list().load()
    except FeaturepickError as e:
        click.echo(f"Error: {e}", err=True)
        click.echo("Hint: Run 'featurepick select' first.", err=True)
        raise SystemExit(1)

    if from_sha:
        try:
            sequence = sequence.starting_at(from_sha)
        except KeyError:
            click.echo(f"Error: Commit '{from_sha}' is not in the commit list.", err=True)
            raise SystemExit(1)
    elif skip:
        sequence = sequence.skip(skip)

    log.debug(f"Picking {len(sequence)} commits")
    run_pick_session(app, sequence, format, pretty)
